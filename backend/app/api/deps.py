"""Shared route dependencies: bearer-token auth and role guards."""
from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.errors import NotAuthenticated, PermissionDenied
from app.schemas.auth import TokenUser
from app.schemas.common import Role
from app.services.auth_service import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenUser:
    """Missing token -> 401; bad or expired token -> 403."""
    if credentials is None or not credentials.credentials:
        raise NotAuthenticated("Access token required")
    return decode_access_token(credentials.credentials)


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenUser | None:
    if credentials is None or not credentials.credentials:
        return None
    return decode_access_token(credentials.credentials)


def require_role(*roles: Role):
    """Dependency factory: the caller must hold one of *roles*."""
    allowed = {r.value for r in roles}

    def _guard(user: TokenUser = Depends(get_current_user)) -> TokenUser:
        if user.role.value not in allowed:
            raise PermissionDenied("Insufficient permissions")
        return user

    return _guard


require_student = require_role(Role.STUDENT)
require_teacher = require_role(Role.TEACHER, Role.ADMIN)
require_admin = require_role(Role.ADMIN)
