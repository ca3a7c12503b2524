# classroll/models/__init__.py
"""Import all models here so Alembic sees the full metadata."""
from .base import Base
from .user import User
from .class_model import ClassModel, class_users
from .student import Student
from .session import ClassSession, SessionStatus, NON_POINTABLE_STATUSES
from .attendance import Attendance, AttendanceStatus

__all__ = [
    "Base", "User", "ClassModel", "class_users", "Student",
    "ClassSession", "SessionStatus", "NON_POINTABLE_STATUSES",
    "Attendance", "AttendanceStatus",
]
