# classroll/services/class_service.py
from typing import Any, Dict, List, Optional
from sqlalchemy import select, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ..core.database import conflict_insert
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.security import Subject
from ..models.class_model import ClassModel, class_users
from ..models.session import ClassSession
from ..models.student import Student
from ..models.user import User
from ..utils.school_calendar import generate_school_year_dates, normalize_weekday, require_weekday
from .base_service import BaseService, validate_id
from .session_service import SessionService

logger = logging.getLogger(__name__)


class ClassService(BaseService[ClassModel]):
    def __init__(self, db: AsyncSession):
        super().__init__(ClassModel, db)
        self.sessions = SessionService(db)

    async def get_class(self, class_id: int) -> ClassModel:
        class_id = validate_id(class_id, "class_id")
        return await self.get_or_404(class_id, "Class")

    async def list_all(self) -> List[ClassModel]:
        result = await self.db.execute(select(ClassModel).order_by(ClassModel.name))
        return list(result.scalars().all())

    async def list_for_subject(self, subject: Subject) -> List[ClassModel]:
        """Admins see every class; others see classes they own or co-manage."""
        if subject.is_admin:
            return await self.list_all()
        co_managed = select(class_users.c.class_id).where(class_users.c.user_id == subject.id)
        stmt = (
            select(ClassModel)
            .where(or_(ClassModel.owner_id == subject.id, ClassModel.id.in_(co_managed)))
            .order_by(ClassModel.name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # SESSION SCHEDULING

    async def set_weekday(
        self, class_id: int, weekday: Any, start_year: Optional[int] = None
    ) -> List[ClassSession]:
        """Store a new weekday rule and add its dates for the school year.

        Sessions generated under the previous rule are kept.
        """
        iso = require_weekday(weekday)
        class_obj = await self.get_class(class_id)
        dates = generate_school_year_dates(iso, start_year)

        async with self.transaction():
            class_obj.weekday = iso
            await self.db.flush()
            await self.sessions.insert_missing(class_obj.id, dates)
        logger.info("Class %s weekday set to %s", class_obj.id, iso)
        return await self.sessions.list_for_class(class_obj.id)

    async def generate_sessions(
        self, class_id: int, weekday: Any = None, start_year: Optional[int] = None
    ) -> List[ClassSession]:
        """Generate the school year's sessions from the given weekday or the stored rule."""
        class_obj = await self.get_class(class_id)
        iso = normalize_weekday(weekday) if weekday is not None else None
        if weekday is not None and iso is None:
            raise ValidationError(f"Invalid weekday: {weekday!r}", field="weekday")
        if iso is None:
            iso = normalize_weekday(class_obj.weekday)
        if iso is None:
            raise ValidationError("A weekday is required for this class", field="weekday")

        dates = generate_school_year_dates(iso, start_year)
        async with self.transaction():
            if class_obj.weekday != iso:
                class_obj.weekday = iso
                await self.db.flush()
            await self.sessions.insert_missing(class_obj.id, dates)
        return await self.sessions.list_for_class(class_obj.id)

    # ADMINISTRATION

    async def create_class(self, data: Dict[str, Any]) -> ClassModel:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        owner_id = data.get("owner_id")
        if owner_id is not None:
            await self._require_user(owner_id)
        return await self.create({
            "name": name,
            "description": data.get("description"),
            "owner_id": owner_id,
        })

    async def update_class(self, class_id: int, changes: Dict[str, Any]) -> ClassModel:
        """Apply only the fields present in ``changes``; ``owner_id=None`` clears the owner."""
        class_obj = await self.get_class(class_id)
        values = {}
        if "name" in changes and changes["name"] is not None:
            name = changes["name"].strip()
            if not name:
                raise ValidationError("Name cannot be empty", field="name")
            values["name"] = name
        if "description" in changes and changes["description"] is not None:
            values["description"] = changes["description"]
        if "owner_id" in changes:
            if changes["owner_id"] is not None:
                await self._require_user(changes["owner_id"])
            values["owner_id"] = changes["owner_id"]
        return await self.update(class_obj, values)

    async def delete_class(self, class_id: int) -> None:
        """Delete a class that has neither sessions nor students."""
        class_id = validate_id(class_id, "class_id")
        async with self.transaction():
            # Row lock: session and student inserts wait on their key share until we finish
            result = await self.db.execute(
                select(ClassModel.id).where(ClassModel.id == class_id).with_for_update()
            )
            if result.scalar_one_or_none() is None:
                raise NotFoundError("Class", class_id)
            sessions = await self._count(ClassSession, ClassSession.class_id == class_id)
            students = await self._count(Student, Student.class_id == class_id)
            if sessions or students:
                raise ConflictError(
                    "Class still has sessions or students",
                    existing=sessions + students,
                )
            await self.db.execute(delete(class_users).where(class_users.c.class_id == class_id))
            await self.db.execute(delete(ClassModel).where(ClassModel.id == class_id))
        logger.info("Class %s deleted", class_id)

    async def list_managers(self, class_id: int) -> List[Dict[str, Any]]:
        """Owner first, then co-managers by username."""
        class_obj = await self.get_class(class_id)
        owner_q = (
            select(User.id, User.username, User.role)
            .join(ClassModel, ClassModel.owner_id == User.id)
            .where(ClassModel.id == class_obj.id)
        )
        co_q = (
            select(User.id, User.username, User.role)
            .join(class_users, class_users.c.user_id == User.id)
            .where(class_users.c.class_id == class_obj.id)
        )
        managers: Dict[int, Dict[str, Any]] = {}
        for row in (await self.db.execute(owner_q)).all():
            managers[row.id] = {"id": row.id, "username": row.username, "role": row.role, "is_owner": True}
        for row in (await self.db.execute(co_q)).all():
            managers.setdefault(
                row.id, {"id": row.id, "username": row.username, "role": row.role, "is_owner": False}
            )
        return sorted(managers.values(), key=lambda m: (not m["is_owner"], m["username"]))

    async def add_manager(self, class_id: int, user_id: int) -> None:
        class_obj = await self.get_class(class_id)
        await self._require_user(user_id)
        async with self.transaction():
            stmt = (
                conflict_insert(self.db, class_users)
                .values(class_id=class_obj.id, user_id=user_id)
                .on_conflict_do_nothing(index_elements=["class_id", "user_id"])
            )
            await self.db.execute(stmt)

    async def remove_manager(self, class_id: int, user_id: int) -> None:
        class_id = validate_id(class_id, "class_id")
        user_id = validate_id(user_id, "user_id")
        async with self.transaction():
            await self.db.execute(
                delete(class_users).where(
                    class_users.c.class_id == class_id,
                    class_users.c.user_id == user_id,
                )
            )

    async def _require_user(self, user_id: int) -> None:
        user_id = validate_id(user_id, "user_id")
        result = await self.db.execute(select(User.id).where(User.id == user_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("User", user_id)

    async def _count(self, model, *criteria) -> int:
        result = await self.db.execute(select(func.count()).select_from(model).where(*criteria))
        return result.scalar() or 0
