from typing import Any, Dict, List
from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.security import PROF
from ..models.attendance import Attendance, AttendanceStatus
from ..models.class_model import ClassModel
from ..models.session import ClassSession
from ..models.student import Student
from ..models.user import User


class AdminService:
    """Read-only overviews for administrators."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_profs(self) -> List[Dict[str, Any]]:
        stmt = select(User.id, User.username).where(User.role == PROF).order_by(User.username)
        result = await self.db.execute(stmt)
        return [{"id": row.id, "username": row.username} for row in result.all()]

    async def get_stats(self) -> Dict[str, int]:
        stats = {}
        for key, model in (("users", User), ("students", Student), ("classes", ClassModel), ("sessions", ClassSession)):
            result = await self.db.execute(select(func.count()).select_from(model))
            stats[key] = result.scalar() or 0
        return stats

    async def get_attendance_rates(self) -> List[Dict[str, Any]]:
        """Share of "present" marks among all marks, per class."""
        presents = func.sum(case((Attendance.status == AttendanceStatus.PRESENT, 1), else_=0))
        stmt = (
            select(
                ClassModel.id,
                ClassModel.name,
                func.count(Attendance.id).label("marked"),
                func.coalesce(presents, 0).label("presents"),
            )
            .select_from(ClassModel)
            .outerjoin(ClassSession, ClassSession.class_id == ClassModel.id)
            .outerjoin(Attendance, Attendance.session_id == ClassSession.id)
            .group_by(ClassModel.id, ClassModel.name)
            .order_by(ClassModel.name)
        )
        result = await self.db.execute(stmt)
        rates = []
        for row in result.all():
            marked = int(row.marked or 0)
            present = int(row.presents or 0)
            rates.append({
                "id": row.id,
                "name": row.name,
                "marked": marked,
                "presents": present,
                "rate": round(100.0 * present / marked, 1) if marked else 0.0,
            })
        return rates
