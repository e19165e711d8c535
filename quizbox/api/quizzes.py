from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from quizbox.api.deps import get_repo
from quizbox.core.auth import Identity, get_current_identity
from quizbox.schemas import QuizOut, QuizSummary, ResponsesOut
from quizbox.services import authoring, responses
from quizbox.services.repository import QuizRepository

router = APIRouter()


@router.post("", response_model=QuizOut, status_code=status.HTTP_201_CREATED)
def create_quiz(payload: Any = Body(None), identity: Identity = Depends(get_current_identity), repo: QuizRepository = Depends(get_repo)):
    data = authoring.parse_quiz(payload)
    quiz = authoring.create_quiz(repo, identity, data.title, data.description, data.questions)
    return QuizOut.model_validate(quiz)


@router.get("", response_model=List[QuizSummary])
def list_my_quizzes(identity: Identity = Depends(get_current_identity), repo: QuizRepository = Depends(get_repo)):
    return authoring.list_quizzes_for(repo, identity)


@router.get("/{quiz_id}", response_model=QuizOut)
def get_my_quiz(quiz_id: str, identity: Identity = Depends(get_current_identity), repo: QuizRepository = Depends(get_repo)):
    return QuizOut.model_validate(authoring.get_owned_quiz(repo, identity, quiz_id))


@router.get("/{quiz_id}/responses", response_model=ResponsesOut)
def list_quiz_responses(quiz_id: str, identity: Identity = Depends(get_current_identity), repo: QuizRepository = Depends(get_repo)):
    return responses.list_responses(repo, identity, quiz_id)
