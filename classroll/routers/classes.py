from typing import List, Optional
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Subject
from ..schemas.class_schemas import ClassOut, GenerateSessionsRequest, WeekdayUpdate
from ..schemas.session_schemas import ExtraSessionCreate, SessionOut
from ..services.access_service import AccessService
from ..services.class_service import ClassService
from ..services.session_service import SessionService
from .deps import get_current_subject, require_staff

router = APIRouter(prefix="/api/classes", tags=["Classes"])


@router.get("", response_model=List[ClassOut])
async def list_my_classes(
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    """Classes the caller may manage (all of them for admins)"""
    return await ClassService(db).list_for_subject(subject)


@router.get("/{class_id}", response_model=ClassOut)
async def get_class(
    class_id: int = Path(..., gt=0),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await AccessService(db).require_class_access(subject, class_id)
    return await ClassService(db).get_class(class_id)


@router.post("/{class_id}/generate-sessions", response_model=List[SessionOut])
async def generate_sessions(
    class_id: int = Path(..., gt=0),
    body: Optional[GenerateSessionsRequest] = None,
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    """Create the school year's sessions for the class weekday (existing dates are kept)"""
    await AccessService(db).require_class_access(subject, class_id)
    body = body or GenerateSessionsRequest()
    return await ClassService(db).generate_sessions(class_id, body.weekday, body.start_year)


@router.patch("/{class_id}/weekday", response_model=List[SessionOut])
async def update_weekday(
    body: WeekdayUpdate,
    class_id: int = Path(..., gt=0),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await AccessService(db).require_class_access(subject, class_id)
    return await ClassService(db).set_weekday(class_id, body.weekday, body.start_year)


@router.post("/{class_id}/sessions/extra", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
async def create_extra_session(
    body: ExtraSessionCreate,
    class_id: int = Path(..., gt=0),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await AccessService(db).require_class_access(subject, class_id)
    return await SessionService(db).create_extra_session(class_id, body.date, body.note)
