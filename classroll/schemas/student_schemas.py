from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .common import EntityId, WeekdayInput


class StudentCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    class_id: EntityId
    phone: Optional[str] = Field(None, max_length=30)
    weekday: Optional[WeekdayInput] = None


class StudentWeekdayUpdate(BaseModel):
    weekday: Optional[WeekdayInput] = None  # null clears the override


class StudentOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    class_id: int
    phone: Optional[str] = None
    weekday: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
