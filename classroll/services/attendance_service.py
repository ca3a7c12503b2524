from typing import List, Optional, Union
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ..core.database import conflict_insert
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.attendance import Attendance, AttendanceStatus
from ..models.session import ClassSession
from ..models.student import Student
from .base_service import BaseService, validate_id

logger = logging.getLogger(__name__)


def normalize_mark(
    status: Union[str, AttendanceStatus], comment: Optional[str]
) -> tuple[AttendanceStatus, Optional[str]]:
    """Validate a mark's status and return the comment to store with it.

    Excused absences require a non-blank comment, stored trimmed. Any other
    status drops the comment.
    """
    try:
        status = AttendanceStatus(status)
    except ValueError:
        raise ValidationError(f"Invalid attendance status: {status!r}", field="status")

    if status is AttendanceStatus.EXCUSED:
        comment = comment.strip() if isinstance(comment, str) else ""
        if not comment:
            raise ValidationError('A comment is required for "excused"', field="comment")
        return status, comment
    return status, None


class AttendanceService(BaseService[Attendance]):
    def __init__(self, db: AsyncSession):
        super().__init__(Attendance, db)

    async def upsert_mark(
        self,
        student_id: int,
        session_id: int,
        status: Union[str, AttendanceStatus],
        comment: Optional[str] = None,
    ) -> Attendance:
        """Record one student's attendance for one session; the latest write wins."""
        student_id = validate_id(student_id, "student_id")
        session_id = validate_id(session_id, "session_id")

        async with self.transaction():
            # Shared lock: a concurrent status change must wait for this write
            result = await self.db.execute(
                select(ClassSession.class_id, ClassSession.status)
                .where(ClassSession.id == session_id)
                .with_for_update(read=True)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("Session", session_id)
            session_class_id, session_status = row
            if not session_status.is_pointable:
                raise ConflictError(
                    f"Attendance cannot be recorded on a {session_status.value} session"
                )
            status, comment = normalize_mark(status, comment)

            result = await self.db.execute(select(Student.class_id).where(Student.id == student_id))
            student_class_id = result.scalar_one_or_none()
            if student_class_id is None:
                raise NotFoundError("Student", student_id)
            if session_class_id != student_class_id:
                raise ValidationError("Student is not enrolled in this session's class", field="student_id")

            stmt = conflict_insert(self.db, Attendance).values(
                student_id=student_id,
                session_id=session_id,
                status=status,
                comment=comment,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["student_id", "session_id"],
                set_={
                    "status": stmt.excluded.status,
                    "comment": stmt.excluded.comment,
                    "updated_at": func.now(),
                },
            )
            await self.db.execute(stmt)

        return await self.get_mark(student_id, session_id)

    async def get_mark(self, student_id: int, session_id: int) -> Optional[Attendance]:
        stmt = (
            select(Attendance)
            .where(Attendance.student_id == student_id, Attendance.session_id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_session(self, session_id: int) -> List[Attendance]:
        stmt = (
            select(Attendance)
            .where(Attendance.session_id == session_id)
            .order_by(Attendance.student_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_for_class(self, class_id: int) -> List[Attendance]:
        stmt = (
            select(Attendance)
            .join(ClassSession, ClassSession.id == Attendance.session_id)
            .where(ClassSession.class_id == class_id)
            .order_by(ClassSession.date, Attendance.student_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
