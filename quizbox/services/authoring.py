"""
Quiz authoring: creation of a quiz with its ordered questions, and the
listings built on top of it.
"""
import logging
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from quizbox.core.auth import Identity
from quizbox.core.errors import NotFound, ValidationFailed
from quizbox.models.orm import Question, QuestionType, Quiz
from quizbox.schemas import PublicQuizOut, QuestionIn, QuestionOut, QuizCreate, QuizSummary
from quizbox.services.ownership import authorize_quiz_access
from quizbox.services.repository import QuizRepository

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MIN_QUESTIONS = 2
MIN_OPTIONS = 2


def parse_quiz(payload: Any) -> QuizCreate:
    try:
        return QuizCreate.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(
            "malformed-quiz",
            "Validation failed",
            [{"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]} for e in exc.errors()],
        ) from exc


def _question_ref(index: int, text: str) -> dict:
    return {"index": index, "text": text}


def _clean_options(index: int, q: QuestionIn) -> List[str]:
    if q.type != QuestionType.SINGLE_CHOICE:
        return []
    options = [o.strip() for o in q.options if o and o.strip()]
    if len(options) < MIN_OPTIONS:
        raise ValidationFailed(
            "too-few-options",
            f"Question {index + 1} needs at least {MIN_OPTIONS} non-empty options",
            _question_ref(index, q.text),
        )
    if len(set(options)) != len(options):
        raise ValidationFailed(
            "duplicate-options",
            f"Question {index + 1} has duplicate options",
            _question_ref(index, q.text),
        )
    return options


def build_questions(questions: Sequence[QuestionIn]) -> List[Question]:
    """Validate the submitted questions and turn them into rows, in order.

    ``order`` is always the position in ``questions``.
    """
    if len(questions) < MIN_QUESTIONS:
        raise ValidationFailed("too-few-questions", f"At least {MIN_QUESTIONS} questions are required")
    rows = []
    for index, q in enumerate(questions):
        text = (q.text or "").strip()
        if not text:
            raise ValidationFailed("empty-question-text", f"Question {index + 1} text is required", _question_ref(index, q.text))
        options = _clean_options(index, q)
        rows.append(Question(text=text, type=q.type, options=options, required=q.required, order=index))
    return rows


def create_quiz(
    repo: QuizRepository,
    identity: Identity,
    title: str,
    description: Optional[str],
    questions: Sequence[QuestionIn],
) -> Quiz:
    title = (title or "").strip()
    if not title:
        raise ValidationFailed("invalid-title", "Title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationFailed("invalid-title", f"Title must be at most {MAX_TITLE_LENGTH} characters")
    rows = build_questions(questions)
    description = description.strip() if description and description.strip() else None

    with repo.atomic():
        quiz = repo.add_quiz(Quiz(title=title, description=description, creator_id=identity.user_id), rows)
    logger.info("Quiz %s created by %s with %d questions", quiz.id, identity.user_id, len(rows))
    return quiz


def _creator_name(quiz: Quiz) -> str:
    return quiz.creator.name or quiz.creator.email


def _summaries(repo: QuizRepository, quizzes: List[Quiz], with_creator: bool) -> List[QuizSummary]:
    counts = repo.response_counts([q.id for q in quizzes])
    return [
        QuizSummary(
            id=q.id,
            title=q.title,
            description=q.description,
            created_at=q.created_at,
            creator_name=_creator_name(q) if with_creator else None,
            question_count=len(q.questions),
            response_count=counts.get(q.id, 0),
        )
        for q in quizzes
    ]


def list_quizzes_for(repo: QuizRepository, identity: Identity) -> List[QuizSummary]:
    """The caller's own quizzes, newest first."""
    return _summaries(repo, repo.list_quizzes(creator_id=identity.user_id), with_creator=False)


def list_public_quizzes(repo: QuizRepository) -> List[QuizSummary]:
    return _summaries(repo, repo.list_quizzes(), with_creator=True)


def get_public_quiz(repo: QuizRepository, quiz_id: str) -> PublicQuizOut:
    quiz = repo.get_quiz(quiz_id)
    if quiz is None:
        raise NotFound("Quiz not found")
    return PublicQuizOut(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        creator_name=_creator_name(quiz),
        questions=[QuestionOut.model_validate(q) for q in quiz.questions],
        response_count=repo.count_responses(quiz.id),
    )


def get_owned_quiz(repo: QuizRepository, identity: Identity, quiz_id: str) -> Quiz:
    return authorize_quiz_access(repo, identity, quiz_id)
