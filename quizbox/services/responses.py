"""
Response validation and collection.

A submission moves through ``Received -> Validating -> Rejected`` or
``Received -> Validating -> Persisting -> Committed``. Validation
short-circuits on the first failure, and a rejected submission writes
nothing. There is no retry: callers resubmit a fresh attempt.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from quizbox.core.auth import Identity
from quizbox.core.errors import NotFound, ValidationFailed
from quizbox.models.orm import Answer, Question, QuestionType, Quiz, Response
from quizbox.schemas import AnswerIn, QuestionOut, ResponseOut, ResponsesOut, SubmissionIn
from quizbox.services.ownership import authorize_quiz_access
from quizbox.services.repository import QuizRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Accepted:
    response_id: str
    answers_count: int


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_submission(payload: Any) -> SubmissionIn:
    try:
        return SubmissionIn.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(
            "malformed-answers",
            "Answers must be provided as an array of {questionId, value} objects",
            [{"loc": list(e["loc"]), "message": e["msg"]} for e in exc.errors()],
        ) from exc


def check_required(questions: List[Question], answers: List[AnswerIn]) -> None:
    """Every required question must have an answer entry, whatever its value."""
    answered = {a.question_id for a in answers}
    missing = [q.text for q in questions if q.required and q.id not in answered]
    if missing:
        raise ValidationFailed("missing-required", "Please answer all required questions", missing)


def check_answers(questions: List[Question], answers: List[AnswerIn], strict_choices: bool = False) -> None:
    by_id: Dict[str, Question] = {q.id: q for q in questions}
    seen = set()
    for index, a in enumerate(answers):
        if not a.question_id or a.value is None or not a.value.strip():
            raise ValidationFailed(
                "invalid-answer",
                "Each answer must have questionId and a non-empty value",
                {"index": index, "questionId": a.question_id},
            )
        question = by_id.get(a.question_id)
        if question is None:
            raise ValidationFailed(
                "unknown-question",
                "Answer refers to a question that is not part of this quiz",
                {"index": index, "questionId": a.question_id},
            )
        if a.question_id in seen:
            raise ValidationFailed(
                "duplicate-answer",
                "Each question can be answered only once",
                {"index": index, "questionId": a.question_id},
            )
        seen.add(a.question_id)
        if strict_choices and question.type == QuestionType.SINGLE_CHOICE and a.value.strip() not in question.options:
            raise ValidationFailed(
                "invalid-choice",
                f"Answer to '{question.text}' must be one of its options",
                {"index": index, "questionId": a.question_id, "options": list(question.options)},
            )


def submit_response(repo: QuizRepository, quiz_id: str, payload: Any, strict_choices: bool = False) -> Accepted:
    quiz = repo.get_quiz(quiz_id)
    if quiz is None:
        raise NotFound("Quiz not found")
    try:
        submission = parse_submission(payload)
        check_required(quiz.questions, submission.answers)
        check_answers(quiz.questions, submission.answers, strict_choices=strict_choices)
    except ValidationFailed as exc:
        logger.info("Rejected submission for quiz %s: %s", quiz_id, exc.reason)
        raise

    response = Response(
        quiz_id=quiz.id,
        submitter_name=_blank_to_none(submission.submitter_name),
        submitter_email=_blank_to_none(submission.submitter_email),
    )
    answers = [Answer(question_id=a.question_id, value=a.value.strip()) for a in submission.answers]
    with repo.atomic():
        written = repo.add_response(response, answers)
        response_id = response.id
    logger.info("Accepted response %s for quiz %s with %d answers", response_id, quiz_id, written)
    return Accepted(response_id=response_id, answers_count=written)


def list_responses(repo: QuizRepository, identity: Identity, quiz_id: str) -> ResponsesOut:
    """All responses to a quiz the caller owns, newest first."""
    quiz: Quiz = authorize_quiz_access(repo, identity, quiz_id)
    responses = repo.list_responses(quiz.id)
    return ResponsesOut(
        quiz={"id": quiz.id, "title": quiz.title},
        questions=[QuestionOut.model_validate(q) for q in quiz.questions],
        responses=[ResponseOut.model_validate(r) for r in responses],
        total_responses=len(responses),
    )
