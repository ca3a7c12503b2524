from typing import Any, Dict, List
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.attendance import Attendance
from ..models.class_model import ClassModel
from ..models.student import Student
from ..utils.school_calendar import generate_school_year_dates, normalize_weekday
from .base_service import BaseService, validate_id
from .session_service import SessionService

logger = logging.getLogger(__name__)


def _optional_weekday(value: Any):
    if value is None:
        return None
    iso = normalize_weekday(value)
    if iso is None:
        raise ValidationError(f"Invalid weekday: {value!r}", field="weekday")
    return iso


class StudentService(BaseService[Student]):
    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)
        self.sessions = SessionService(db)

    async def get_student(self, student_id: int) -> Student:
        student_id = validate_id(student_id, "student_id")
        return await self.get_or_404(student_id, "Student")

    async def list_for_class(self, class_id: int) -> List[Student]:
        stmt = (
            select(Student)
            .where(Student.class_id == class_id)
            .order_by(Student.last_name, Student.first_name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_student(self, data: Dict[str, Any]) -> Student:
        """Enroll a student; an individual weekday also schedules that day's sessions."""
        class_id = validate_id(data.get("class_id"), "class_id")
        iso = _optional_weekday(data.get("weekday"))
        first_name = (data.get("first_name") or "").strip()
        last_name = (data.get("last_name") or "").strip()
        if not first_name or not last_name:
            raise ValidationError("First and last name are required")

        result = await self.db.execute(select(ClassModel.id).where(ClassModel.id == class_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Class", class_id)

        student = Student(
            first_name=first_name,
            last_name=last_name,
            class_id=class_id,
            phone=data.get("phone"),
            weekday=iso,
        )
        async with self.transaction():
            self.db.add(student)
            if iso is not None:
                await self.sessions.insert_missing(class_id, generate_school_year_dates(iso))
        await self.db.refresh(student)
        return student

    async def set_weekday(self, student_id: int, weekday: Any) -> Student:
        """Set or clear a student's own weekday; setting one adds the matching sessions."""
        student = await self.get_student(student_id)
        iso = _optional_weekday(weekday)
        async with self.transaction():
            student.weekday = iso
            if iso is not None:
                await self.db.flush()
                await self.sessions.insert_missing(student.class_id, generate_school_year_dates(iso))
        await self.db.refresh(student)
        return student

    async def delete_student(self, student_id: int) -> None:
        """Remove a student who has no attendance history."""
        student_id = validate_id(student_id, "student_id")
        async with self.transaction():
            # Row lock: a concurrent mark insert waits on its key share until we finish
            result = await self.db.execute(
                select(Student).where(Student.id == student_id).with_for_update()
            )
            student = result.scalar_one_or_none()
            if student is None:
                raise NotFoundError("Student", student_id)
            result = await self.db.execute(
                select(func.count()).select_from(Attendance).where(Attendance.student_id == student_id)
            )
            existing = result.scalar() or 0
            if existing:
                raise ConflictError("Student has recorded attendance", existing=existing)
            class_id = student.class_id
            await self.db.execute(delete(Student).where(Student.id == student_id))
        logger.info("Student %s removed from class %s", student_id, class_id)
