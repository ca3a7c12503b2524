from typing import List
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.admin_schemas import AttendanceRateOut, ProfOut, StatsOut
from ..schemas.class_schemas import ClassCreate, ClassOut, ClassUpdate, ClassUserLink, ManagerOut
from ..services.admin_service import AdminService
from ..services.class_service import ClassService
from .deps import require_admin

router = APIRouter(
    prefix="/api/admin",
    tags=["Administration"],
    dependencies=[Depends(require_admin)],
)


@router.get("/profs", response_model=List[ProfOut])
async def list_profs(db: AsyncSession = Depends(get_db)):
    return await AdminService(db).list_profs()


@router.get("/stats", response_model=StatsOut)
async def get_stats(db: AsyncSession = Depends(get_db)):
    return await AdminService(db).get_stats()


@router.get("/attendance-rate", response_model=List[AttendanceRateOut])
async def get_attendance_rates(db: AsyncSession = Depends(get_db)):
    return await AdminService(db).get_attendance_rates()


@router.get("/classes", response_model=List[ClassOut])
async def list_classes(db: AsyncSession = Depends(get_db)):
    return await ClassService(db).list_all()


@router.post("/classes", response_model=ClassOut, status_code=201)
async def create_class(body: ClassCreate, db: AsyncSession = Depends(get_db)):
    return await ClassService(db).create_class(body.model_dump())


@router.patch("/classes/{class_id}", response_model=ClassOut)
async def update_class(
    body: ClassUpdate,
    class_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
):
    return await ClassService(db).update_class(class_id, body.model_dump(exclude_unset=True))


@router.delete("/classes/{class_id}")
async def delete_class(class_id: int = Path(..., gt=0), db: AsyncSession = Depends(get_db)):
    await ClassService(db).delete_class(class_id)
    return {"ok": True}


@router.get("/classes/{class_id}/managers", response_model=List[ManagerOut])
async def list_managers(class_id: int = Path(..., gt=0), db: AsyncSession = Depends(get_db)):
    """Owner first, then co-managers"""
    return await ClassService(db).list_managers(class_id)


@router.post("/class-users")
async def add_class_user(body: ClassUserLink, db: AsyncSession = Depends(get_db)):
    await ClassService(db).add_manager(body.class_id, body.user_id)
    return {"ok": True}


@router.delete("/class-users")
async def remove_class_user(
    class_id: int = Query(..., gt=0),
    user_id: int = Query(..., gt=0),
    db: AsyncSession = Depends(get_db),
):
    await ClassService(db).remove_manager(class_id, user_id)
    return {"ok": True}
