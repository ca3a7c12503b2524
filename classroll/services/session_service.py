# classroll/services/session_service.py
"""Session calendar: idempotent materialization and status transitions."""
from datetime import date
from typing import Iterable, List, Optional, Union
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ..core.database import conflict_insert
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.attendance import Attendance
from ..models.class_model import ClassModel
from ..models.session import ClassSession, SessionStatus
from .base_service import BaseService, validate_id

logger = logging.getLogger(__name__)


def parse_session_status(value: Union[str, SessionStatus]) -> SessionStatus:
    try:
        return SessionStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid session status: {value!r}", field="status")


class SessionService(BaseService[ClassSession]):
    def __init__(self, db: AsyncSession):
        super().__init__(ClassSession, db)

    async def _require_class(self, class_id: int) -> None:
        result = await self.db.execute(select(ClassModel.id).where(ClassModel.id == class_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Class", class_id)

    async def list_for_class(self, class_id: int) -> List[ClassSession]:
        stmt = (
            select(ClassSession)
            .where(ClassSession.class_id == class_id)
            .order_by(ClassSession.date)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def insert_missing(self, class_id: int, dates: Iterable[date]) -> int:
        """Insert one scheduled session per date, skipping dates the class already has.

        Runs inside the caller's transaction. Existing sessions are never
        touched, so changing a weekday rule only ever adds dates.
        """
        unique_dates = sorted(set(dates))
        if not unique_dates:
            return 0
        stmt = (
            conflict_insert(self.db, ClassSession)
            .values([
                {"class_id": class_id, "date": day, "status": SessionStatus.SCHEDULED}
                for day in unique_dates
            ])
            .on_conflict_do_nothing(index_elements=["class_id", "date"])
        )
        result = await self.db.execute(stmt)
        inserted = max(result.rowcount or 0, 0)
        logger.info("Class %s: %s new sessions out of %s dates", class_id, inserted, len(unique_dates))
        return inserted

    async def ensure_sessions(self, class_id: int, dates: Iterable[date]) -> List[ClassSession]:
        class_id = validate_id(class_id, "class_id")
        async with self.transaction():
            await self._require_class(class_id)
            await self.insert_missing(class_id, dates)
        return await self.list_for_class(class_id)

    async def add_dates(self, class_id: int, dates: List[date]) -> List[ClassSession]:
        if not dates:
            raise ValidationError("At least one date is required", field="dates")
        return await self.ensure_sessions(class_id, dates)

    async def count_attendance(self, session_id: int) -> int:
        stmt = select(func.count()).select_from(Attendance).where(Attendance.session_id == session_id)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def change_status(
        self,
        session_id: int,
        status: Union[str, SessionStatus],
        note: Optional[str] = None,
        force: bool = False,
    ) -> ClassSession:
        """Relabel a session.

        Moving to a status where attendance cannot be taken is refused while
        marks exist, unless ``force`` is set; then the marks are deleted in
        the same transaction as the status change.
        """
        session_id = validate_id(session_id, "session_id")
        new_status = parse_session_status(status)

        async with self.transaction():
            result = await self.db.execute(
                select(ClassSession).where(ClassSession.id == session_id).with_for_update()
            )
            session = result.scalar_one_or_none()
            if session is None:
                raise NotFoundError("Session", session_id)

            if not new_status.is_pointable:
                existing = await self.count_attendance(session_id)
                if existing and not force:
                    raise ConflictError(
                        "Attendance has been recorded for this session; "
                        "confirm with force=true to delete it",
                        existing=existing,
                    )
                if existing:
                    await self.db.execute(delete(Attendance).where(Attendance.session_id == session_id))
                    logger.info("Session %s: deleted %s attendance marks before marking it %s",
                                session_id, existing, new_status.value)

            session.status = new_status
            session.note = note
        await self.db.refresh(session)
        logger.info("Session %s is now %s", session_id, new_status.value)
        return session

    async def create_extra_session(self, class_id: int, day: date, note: Optional[str] = None) -> ClassSession:
        """Add a one-off session; a class can only meet once per date."""
        class_id = validate_id(class_id, "class_id")
        if not isinstance(day, date):
            raise ValidationError("Invalid date (YYYY-MM-DD)", field="date")

        async with self.transaction():
            await self._require_class(class_id)
            stmt = (
                conflict_insert(self.db, ClassSession)
                .values(class_id=class_id, date=day, status=SessionStatus.EXTRA, note=note)
                .on_conflict_do_nothing(index_elements=["class_id", "date"])
                .returning(ClassSession.__table__.c.id)
            )
            result = await self.db.execute(stmt)
            new_id = result.scalar_one_or_none()
            if new_id is None:
                raise ConflictError("A session already exists for this class on that date")
        return await self.get_or_404(new_id, "Session")
