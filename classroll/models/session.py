# classroll/models/session.py
from sqlalchemy import Column, Integer, Date, Text, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base
import enum


class SessionStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    HOLIDAY = "holiday"
    VACATION = "vacation"
    EXTRA = "extra"

    @property
    def is_pointable(self) -> bool:
        """Attendance may only be recorded on sessions that actually take place."""
        return self not in NON_POINTABLE_STATUSES


NON_POINTABLE_STATUSES = frozenset({
    SessionStatus.CANCELLED,
    SessionStatus.HOLIDAY,
    SessionStatus.VACATION,
})


class ClassSession(Base):
    """One meeting date of a class."""
    __tablename__ = "sessions"

    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(
        Enum(SessionStatus, name="session_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SessionStatus.SCHEDULED,
        server_default=SessionStatus.SCHEDULED.value,
    )
    note = Column(Text)

    __table_args__ = (
        UniqueConstraint("class_id", "date", name="uq_sessions_class_date"),
    )

    class_ref = relationship("ClassModel", back_populates="sessions")
    attendances = relationship("Attendance", back_populates="session")
