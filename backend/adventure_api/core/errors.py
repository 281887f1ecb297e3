"""
Typed application errors.

Services raise one of these for every expected failure (bad input, missing
record, duplicate, auth). The error boundary in `adventure_api.api.errors`
is the only place they are turned into HTTP responses.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    VALIDATION = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500

    @property
    def status_code(self) -> int:
        return self.value


class ApiError(Exception):
    """An expected failure carrying its HTTP status, message and field errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[list[dict[str, Any]]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        # Some legacy responses use a status that differs from the kind default
        self.status_code = status_code or self.kind.status_code
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(status={self.status_code}, message={self.message!r})>"


class ValidationError(ApiError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class UnauthorizedError(ApiError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized request"


class ForbiddenError(ApiError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ApiError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class ConflictError(ApiError):
    kind = ErrorKind.CONFLICT
    default_message = "Resource already exists"


class InternalError(ApiError):
    kind = ErrorKind.INTERNAL
    default_message = "Internal Server Error"
