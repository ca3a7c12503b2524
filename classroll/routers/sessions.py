from typing import List
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Subject
from ..schemas.session_schemas import SessionDatesCreate, SessionOut, SessionStatusUpdate
from ..services.access_service import AccessService
from ..services.session_service import SessionService
from .deps import require_staff

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


@router.get("/class/{class_id}", response_model=List[SessionOut])
async def list_sessions(
    class_id: int = Path(..., gt=0),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    """Sessions of a class ordered by date"""
    await AccessService(db).require_class_access(subject, class_id)
    return await SessionService(db).list_for_class(class_id)


@router.post("", response_model=List[SessionOut])
async def add_session_dates(
    body: SessionDatesCreate,
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    """Add explicit dates; dates the class already has are left as they are"""
    await AccessService(db).require_class_access(subject, body.class_id)
    return await SessionService(db).add_dates(body.class_id, body.dates)


@router.patch("/{session_id}/status", response_model=SessionOut)
async def change_session_status(
    body: SessionStatusUpdate,
    session_id: int = Path(..., gt=0),
    force: bool = Query(False, description="Delete recorded attendance when cancelling"),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await AccessService(db).require_session_access(subject, session_id)
    return await SessionService(db).change_status(session_id, body.status, body.note, force=force)
