from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

from quizbox.core.config import settings
from quizbox.core.errors import Unauthenticated


class Identity(BaseModel):
    user_id: str
    email: Optional[str] = None


authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def create_token(user_id: str, email: Optional[str] = None, ttl_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = settings.ACCESS_TOKEN_EXPIRE_MINUTES if ttl_minutes is None else ttl_minutes
    payload = {"sub": user_id, "email": email, "iat": int(now.timestamp()), "exp": int((now + timedelta(minutes=ttl)).timestamp())}
    return jwt.encode(payload, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def verify_token(token: Optional[str]) -> Optional[Identity]:
    """Return the identity carried by ``token`` or None when it is rejected."""
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.InvalidTokenError:
        return None
    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub:
        return None
    return Identity(user_id=sub, email=payload.get("email"))


def identity_from_header(authorization: Optional[str]) -> Optional[Identity]:
    """Verify a raw ``Authorization`` header value of the form ``Bearer <token>``."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return verify_token(token.strip())


def get_current_identity(authorization: Optional[str] = Depends(authorization_header)) -> Identity:
    identity = identity_from_header(authorization)
    if identity is None:
        raise Unauthenticated("Invalid or expired token")
    return identity
