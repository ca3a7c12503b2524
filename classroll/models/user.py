# classroll/models/user.py
from sqlalchemy import Column, String, CheckConstraint
from .base import Base


class User(Base):
    """Accounts are provisioned by the authentication service; only identity and role live here."""
    __tablename__ = "users"

    username = Column(String(100), nullable=False, unique=True, index=True)
    role = Column(String(20), nullable=False, default="prof")

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'prof')", name="ck_users_role"),
    )
