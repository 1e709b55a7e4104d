# ============================================================================
# FILE: vidtube/core/exceptions.py
# ============================================================================
"""
API error hierarchy.

Every failure a service can report is one of these classes. The application
renders them into the standard response envelope, so services never build
HTTP responses themselves.
"""
from typing import Any, List, Optional


class ApiError(Exception):
    """Base error carrying an HTTP status code and a user-facing message"""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "statusCode": self.status_code,
            "data": None,
            "message": self.message,
            "success": False,
            "errors": self.errors,
        }


class InvalidArgument(ApiError):
    """Malformed or missing id or field"""
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(ApiError):
    """No credential was presented"""
    status_code = 401
    default_message = "Unauthorized request"


class InvalidCredentials(ApiError):
    status_code = 401
    default_message = "Invalid user credentials"


class TokenInvalid(ApiError):
    status_code = 401
    default_message = "Invalid token"


class TokenExpiredOrReused(ApiError):
    """The refresh token no longer matches the one stored for the user"""
    status_code = 401
    default_message = "Refresh token is expired or used"


class Forbidden(ApiError):
    """The acting user does not own the entity being mutated"""
    status_code = 403
    default_message = "You are not allowed to perform this action"


class NotFound(ApiError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Resource already exists"


class Internal(ApiError):
    status_code = 500
    default_message = "Something went wrong"
