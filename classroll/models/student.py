# classroll/models/student.py
from sqlalchemy import Column, String, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base


class Student(Base):
    __tablename__ = "students"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    phone = Column(String(30))
    # Individual meeting day, independent of the class rule
    weekday = Column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint("weekday IS NULL OR weekday BETWEEN 1 AND 7", name="ck_students_weekday"),
    )

    class_ref = relationship("ClassModel", back_populates="students")
    attendances = relationship("Attendance", back_populates="student")
