# juliecraft/core/errors.py

from typing import Any, Dict, Optional

from fastapi import status


class AppError(Exception):
    """Base error for every failure a handler turns into a JSON response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        self.extra = extra or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        body.update(self.extra)
        return body


class ConfigurationError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database not configured"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UpstreamError(AppError):
    """The database call itself failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
