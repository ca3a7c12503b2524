from typing import List
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Subject
from ..schemas.attendance_schemas import AttendanceOut, AttendanceUpsert
from ..services.access_service import AccessService
from ..services.attendance_service import AttendanceService
from .deps import require_staff

router = APIRouter(prefix="/api/attendance", tags=["Attendance"])


@router.get("/class/{class_id}", response_model=List[AttendanceOut])
async def list_class_attendance(
    class_id: int = Path(..., gt=0),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await AccessService(db).require_class_access(subject, class_id)
    return await AttendanceService(db).list_for_class(class_id)


@router.post("", response_model=AttendanceOut)
async def upsert_attendance(
    body: AttendanceUpsert,
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    """Record a mark; a second write for the same student and session replaces it"""
    await AccessService(db).require_session_access(subject, body.session_id)
    return await AttendanceService(db).upsert_mark(
        body.student_id, body.session_id, body.status, body.comment
    )
