from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .common import EntityId, StartYear, WeekdayInput


class WeekdayUpdate(BaseModel):
    weekday: WeekdayInput
    start_year: Optional[StartYear] = None


class GenerateSessionsRequest(BaseModel):
    """Weekday falls back to the class rule when omitted."""
    weekday: Optional[WeekdayInput] = None
    start_year: Optional[StartYear] = None


class ClassCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    owner_id: Optional[EntityId] = None


class ClassUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    owner_id: Optional[EntityId] = None


class ClassOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    owner_id: Optional[int] = None
    weekday: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ManagerOut(BaseModel):
    id: int
    username: str
    role: str
    is_owner: bool


class ClassUserLink(BaseModel):
    class_id: EntityId
    user_id: EntityId
