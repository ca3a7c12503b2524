# classroll/models/class_model.py
from sqlalchemy import Column, String, Integer, Text, ForeignKey, CheckConstraint, Table
from sqlalchemy.orm import relationship
from .base import Base


# Co-manager links: grant management rights without ownership
class_users = Table(
    "class_users",
    Base.metadata,
    Column("class_id", Integer, ForeignKey("classes.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class ClassModel(Base):
    __tablename__ = "classes"

    name = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    weekday = Column(Integer, nullable=True)  # ISO 1 (Monday) .. 7 (Sunday)

    __table_args__ = (
        CheckConstraint("weekday IS NULL OR weekday BETWEEN 1 AND 7", name="ck_classes_weekday"),
    )

    owner = relationship("User")
    students = relationship("Student", back_populates="class_ref")
    sessions = relationship("ClassSession", back_populates="class_ref", order_by="ClassSession.date")
