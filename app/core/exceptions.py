"""
Domain exceptions raised by the service layer.

Each exception carries the HTTP status it maps to. The handlers registered
in main.py render them with the standard response envelope:

    {"success": false, "message": "..."}
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for all expected, user-facing failures."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class ValidationError(AppError):
    """Malformed or missing input. Carries field-level violations."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class AuthError(AppError):
    status_code = 401
    default_message = "Not authorized to access this route"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "You are not allowed to perform this action"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    """Duplicate record or business-rule conflict."""

    status_code = 400
    default_message = "Conflict with existing data"


class InvalidStateError(AppError):
    """The target record is in a state that does not allow the operation."""

    status_code = 400
    default_message = "Operation not allowed in the current state"


class ServerError(AppError):
    status_code = 500
    default_message = "Server error"
