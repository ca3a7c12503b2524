# classroll/routers/deps.py
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.exceptions import AuthError, ForbiddenError
from ..core.security import ADMIN, PROF, Subject, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_subject(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Subject:
    if credentials is None or not credentials.credentials:
        raise AuthError()
    return decode_access_token(credentials.credentials, request.app.state.settings)


def require_roles(*roles: str):
    """Dependency that lets through only subjects holding one of ``roles``."""
    def checker(subject: Subject = Depends(get_current_subject)) -> Subject:
        if subject.role not in roles:
            raise ForbiddenError("Insufficient role")
        return subject
    return checker


require_staff = require_roles(PROF, ADMIN)
require_admin = require_roles(ADMIN)
