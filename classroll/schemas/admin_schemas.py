from pydantic import BaseModel


class ProfOut(BaseModel):
    id: int
    username: str


class StatsOut(BaseModel):
    users: int
    students: int
    classes: int
    sessions: int


class AttendanceRateOut(BaseModel):
    id: int
    name: str
    marked: int
    presents: int
    rate: float
