from typing import List
from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Subject
from ..schemas.student_schemas import StudentCreate, StudentOut, StudentWeekdayUpdate
from ..services.access_service import AccessService
from ..services.student_service import StudentService
from .deps import require_staff

router = APIRouter(prefix="/api/students", tags=["Students"])


@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
async def create_student(
    body: StudentCreate,
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await AccessService(db).require_class_access(subject, body.class_id)
    return await StudentService(db).create_student(body.model_dump())


@router.get("/class/{class_id}", response_model=List[StudentOut])
async def list_students(
    class_id: int = Path(..., gt=0),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await AccessService(db).require_class_access(subject, class_id)
    return await StudentService(db).list_for_class(class_id)


@router.patch("/{student_id}", response_model=StudentOut)
async def update_student_weekday(
    body: StudentWeekdayUpdate,
    student_id: int = Path(..., gt=0),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    service = StudentService(db)
    student = await service.get_student(student_id)
    await AccessService(db).require_class_access(subject, student.class_id)
    return await service.set_weekday(student_id, body.weekday)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: int = Path(..., gt=0),
    subject: Subject = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    service = StudentService(db)
    student = await service.get_student(student_id)
    await AccessService(db).require_class_access(subject, student.class_id)
    await service.delete_student(student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
