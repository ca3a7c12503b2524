from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..models.session import SessionStatus
from .common import EntityId, IsoDate


class SessionOut(BaseModel):
    id: int
    class_id: int
    date: date
    status: SessionStatus
    note: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ExtraSessionCreate(BaseModel):
    date: IsoDate
    note: Optional[str] = None


class SessionStatusUpdate(BaseModel):
    status: SessionStatus
    note: Optional[str] = None


class SessionDatesCreate(BaseModel):
    class_id: EntityId
    dates: List[IsoDate] = Field(..., min_length=1)
