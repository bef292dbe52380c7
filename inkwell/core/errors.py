"""
API error taxonomy.

Domain code raises these where a problem is detected; the HTTP layer
turns them into the uniform `{success: false, message, errors?}` envelope.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""
    
    status_code: int = 500
    default_message: str = "Internal Server Error"
    
    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class BadRequestError(ApiError):
    """Malformed or invalid input."""
    status_code = 400
    default_message = "Bad Request"


class ConflictError(BadRequestError):
    """A unique value (email, username) is already taken."""
    
    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class UnauthorizedError(ApiError):
    """Missing, invalid or expired token, or bad credentials."""
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(ApiError):
    """Authenticated, but not allowed to touch this resource."""
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not Found"


class InternalError(ApiError):
    status_code = 500
    default_message = "Internal Server Error"
