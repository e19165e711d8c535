import logging
from typing import Optional, Tuple

from quizbox.core.auth import Identity, create_token
from quizbox.core.errors import Conflict, NotFound, Unauthenticated
from quizbox.core.security import hash_password, verify_password
from quizbox.models.orm import User
from quizbox.services.repository import QuizRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def signup(repo: QuizRepository, email: str, password: str, name: Optional[str] = None) -> Tuple[User, str]:
    email = normalize_email(email)
    if repo.get_user_by_email(email):
        raise Conflict("User with this email already exists")
    name = name.strip() if name and name.strip() else None
    with repo.atomic():
        user = repo.add_user(User(email=email, name=name, password_hash=hash_password(password)))
        user_id = user.id
    logger.info("User %s signed up", user_id)
    return user, create_token(user_id, email)


def signin(repo: QuizRepository, email: str, password: str) -> Tuple[User, str]:
    user = repo.get_user_by_email(normalize_email(email))
    if user is None or not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid email or password")
    return user, create_token(user.id, user.email)


def get_me(repo: QuizRepository, identity: Identity) -> User:
    user = repo.get_user(identity.user_id)
    if user is None:
        raise NotFound("User not found")
    return user
