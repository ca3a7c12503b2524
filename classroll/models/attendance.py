# classroll/models/attendance.py
from sqlalchemy import Column, Integer, Text, ForeignKey, Enum, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base
import enum


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"


class Attendance(Base):
    __tablename__ = "attendances"

    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(AttendanceStatus, name="attendance_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    comment = Column(Text)

    __table_args__ = (
        UniqueConstraint("student_id", "session_id", name="uq_attendances_student_session"),
        # An excused absence needs a reason; other marks carry none
        CheckConstraint(
            "(status = 'excused' AND comment IS NOT NULL AND length(trim(comment)) > 0)"
            " OR (status <> 'excused' AND comment IS NULL)",
            name="ck_attendances_excused_comment",
        ),
    )

    student = relationship("Student", back_populates="attendances")
    session = relationship("ClassSession", back_populates="attendances")
