from fastapi import APIRouter, Depends, status

from quizbox.api.deps import get_repo
from quizbox.core.auth import Identity, get_current_identity
from quizbox.schemas import AuthOut, SigninIn, SignupIn, UserOut
from quizbox.services import accounts
from quizbox.services.repository import QuizRepository

router = APIRouter()


@router.post("/signup", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupIn, repo: QuizRepository = Depends(get_repo)):
    user, token = accounts.signup(repo, payload.email, payload.password, payload.name)
    return AuthOut(token=token, user=UserOut.model_validate(user))


@router.post("/signin", response_model=AuthOut)
def signin(payload: SigninIn, repo: QuizRepository = Depends(get_repo)):
    user, token = accounts.signin(repo, payload.email, payload.password)
    return AuthOut(token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
def me(identity: Identity = Depends(get_current_identity), repo: QuizRepository = Depends(get_repo)):
    return UserOut.model_validate(accounts.get_me(repo, identity))


@router.post("/signout")
def signout():
    # Tokens are stateless; the client discards its copy.
    return {"message": "Signed out successfully"}
