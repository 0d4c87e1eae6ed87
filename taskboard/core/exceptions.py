"""
Error taxonomy shared by every Taskboard operation.

Services raise these; the API layer turns them into JSON error envelopes.
"""
from typing import Any, Dict, Optional


class TaskboardError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "type": self.error_type,
            "status_code": self.status_code,
            "message": self.message,
        }
        payload.update(self.details)
        return payload


class ValidationError(TaskboardError):
    """A required field is missing or a value is not allowed."""

    status_code = 400
    error_type = "validation_error"


class AuthenticationError(TaskboardError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Could not validate credentials", expired: bool = False):
        if expired:
            super().__init__(message, expired=True)
        else:
            super().__init__(message)
        self.expired = expired


class AuthorizationError(TaskboardError):
    """The caller is authenticated but may not perform the operation."""

    status_code = 403
    error_type = "authorization_error"


class NotFoundError(TaskboardError):
    """A referenced entity id or login does not exist."""

    status_code = 404
    error_type = "not_found"


class ConflictError(TaskboardError):
    """The operation clashes with existing state, e.g. a duplicate login."""

    status_code = 409
    error_type = "conflict"


class InternalError(TaskboardError):
    """Unexpected store failure."""

    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str = "Internal server error", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
