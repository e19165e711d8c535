"""
Error kinds raised by the services and rendered by the API layer.
"""
from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    """Base for every failure that maps onto a client-visible status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "app_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"message": self.message, "type": self.error_type, "status_code": self.status_code}


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "unauthenticated"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "forbidden"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    error_type = "conflict"


class ValidationFailed(AppError):
    """Caller input failed a documented precondition.

    ``reason`` is a stable machine-checkable code such as
    ``missing-required``; ``detail`` carries whatever identifies the
    offending input (a question position, a list of question texts...).
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "validation_failed"

    def __init__(self, reason: str, message: str, detail: Any = None):
        super().__init__(message)
        self.reason = reason
        self.detail = detail

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["reason"] = self.reason
        if self.detail is not None:
            body["details"] = self.detail
        return body
