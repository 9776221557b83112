"""
zap_gateway.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Require the caller to hold the `admin` role in `user_roles`.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from zap_gateway.api.deps import db_session, settings_dep
from zap_gateway.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from zap_gateway.auth.models import Principal
from zap_gateway.services.roles import RoleService
from zap_gateway.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        cfg = JwtConfig.from_settings(settings)
        payload = decode_and_validate(cfg=cfg, token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    subject = str(payload.get("sub", ""))
    if not subject:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    email = payload.get("email")
    return Principal(subject=subject, email=str(email) if email else None)


async def require_admin(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    # Roles live in the database, not in the token, so a demotion takes effect immediately.
    user_id = principal.user_id
    if user_id is None or not await RoleService(session=session).is_admin(user_id):
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN, detail="Unauthorized: User is not an admin"
        )
    return principal
