# classroll/core/exceptions.py
"""Custom exceptions for the classroll application."""
from typing import Any, Dict, Optional


class ClassrollException(Exception):
    """Base exception carrying an HTTP status and extra response fields."""
    def __init__(self, message: str, status_code: int = 500, **extra: Any):
        self.message = message
        self.status_code = status_code
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)


class ValidationError(ClassrollException):
    """Malformed or missing input."""
    def __init__(self, message: str, field: Optional[str] = None):
        extra = {"field": field} if field else {}
        super().__init__(message, 400, **extra)


class StoreConstraintError(ValidationError):
    """A store-level check constraint rejected the write."""


class AuthError(ClassrollException):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, 401)


class ForbiddenError(ClassrollException):
    def __init__(self, message: str = "Access denied"):
        super().__init__(message, 403)


class NotFoundError(ClassrollException):
    """Resource not found exception"""
    def __init__(self, resource: str, id: Any = None):
        message = f"{resource} not found"
        if id is not None:
            message += f" with id: {id}"
        super().__init__(message, 404)


class ConflictError(ClassrollException):
    """The requested change conflicts with the current state.

    ``existing`` reports how many rows block the change, when that applies.
    """
    def __init__(self, message: str, existing: Optional[int] = None):
        extra = {"existing": existing} if existing is not None else {}
        super().__init__(message, 409, **extra)


class DatabaseError(ClassrollException):
    def __init__(self, message: str = "Database error"):
        super().__init__(message, 500)
