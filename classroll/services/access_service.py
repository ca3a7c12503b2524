# classroll/services/access_service.py
"""Authorization predicates over classes and sessions.

A subject may manage a class when it is an admin, the class owner, or a
co-manager listed in ``class_users``. Owner and co-manager are checked
independently; owning a class does not create a link row.
"""
from typing import Any
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ..core.exceptions import ForbiddenError, NotFoundError
from ..core.security import Subject
from ..models.class_model import ClassModel, class_users
from ..models.session import ClassSession
from .base_service import validate_id

logger = logging.getLogger(__name__)


class AccessService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def is_owner(self, subject: Subject, class_id: int) -> bool:
        stmt = select(ClassModel.id).where(
            ClassModel.id == class_id,
            ClassModel.owner_id == subject.id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def is_co_manager(self, subject: Subject, class_id: int) -> bool:
        stmt = select(class_users.c.user_id).where(
            class_users.c.class_id == class_id,
            class_users.c.user_id == subject.id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def can_manage_class(self, subject: Subject, class_id: int) -> bool:
        if subject.is_admin:
            return True
        return await self.is_owner(subject, class_id) or await self.is_co_manager(subject, class_id)

    async def require_class_access(self, subject: Subject, class_id: Any) -> int:
        class_id = validate_id(class_id, "class_id")
        if not await self.can_manage_class(subject, class_id):
            logger.warning("Subject %s (%s) denied access to class %s", subject.id, subject.role, class_id)
            raise ForbiddenError("Access to this class is denied")
        return class_id

    async def require_session_access(self, subject: Subject, session_id: Any) -> int:
        """Resolve the session's class and authorize against it; returns the class id."""
        session_id = validate_id(session_id, "session_id")
        result = await self.db.execute(
            select(ClassSession.class_id).where(ClassSession.id == session_id)
        )
        class_id = result.scalar_one_or_none()
        if class_id is None:
            raise NotFoundError("Session", session_id)
        return await self.require_class_access(subject, class_id)
