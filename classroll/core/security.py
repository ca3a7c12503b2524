# classroll/core/security.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError

from .config import Settings
from .exceptions import AuthError

ADMIN = "admin"
PROF = "prof"


@dataclass(frozen=True)
class Subject:
    """Authenticated caller: user id and role."""
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


def create_access_token(data: dict, settings: Settings, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Subject:
    """Decode a bearer token into a Subject"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthError("Could not validate credentials")

    raw_id = payload.get("id", payload.get("sub"))
    role = payload.get("role")
    try:
        subject_id = int(raw_id)
    except (TypeError, ValueError):
        raise AuthError("Token has no valid subject")
    if not isinstance(role, str) or not role:
        raise AuthError("Token has no role")
    return Subject(id=subject_id, role=role)
