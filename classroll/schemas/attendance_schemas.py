from typing import Optional
from pydantic import BaseModel, ConfigDict

from ..models.attendance import AttendanceStatus
from .common import EntityId


class AttendanceUpsert(BaseModel):
    student_id: EntityId
    session_id: EntityId
    status: AttendanceStatus
    comment: Optional[str] = None


class AttendanceOut(BaseModel):
    student_id: int
    session_id: int
    status: AttendanceStatus
    comment: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
