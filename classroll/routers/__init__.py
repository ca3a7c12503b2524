from . import admin, attendance, classes, health, sessions, students

__all__ = ["admin", "attendance", "classes", "health", "sessions", "students"]
