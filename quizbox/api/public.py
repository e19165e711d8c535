from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from quizbox.api.deps import get_repo
from quizbox.core.config import settings
from quizbox.schemas import PublicQuizOut, QuizSummary, SubmissionOut
from quizbox.services import authoring, responses
from quizbox.services.repository import QuizRepository

router = APIRouter()


@router.get("", response_model=List[QuizSummary])
def list_quizzes(repo: QuizRepository = Depends(get_repo)):
    return authoring.list_public_quizzes(repo)


@router.get("/{quiz_id}", response_model=PublicQuizOut)
def get_quiz(quiz_id: str, repo: QuizRepository = Depends(get_repo)):
    return authoring.get_public_quiz(repo, quiz_id)


@router.post("/{quiz_id}/responses", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
def submit_response(quiz_id: str, payload: Any = Body(None), repo: QuizRepository = Depends(get_repo)):
    # The body is validated by the collector so that an unknown quiz is reported before a malformed body.
    accepted = responses.submit_response(repo, quiz_id, payload, strict_choices=settings.STRICT_CHOICE_ANSWERS)
    return SubmissionOut(response_id=accepted.response_id, answers_count=accepted.answers_count)
