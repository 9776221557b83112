"""
zap_gateway.api.routers.admin

Admin endpoints.

Responsibilities:
- Change a user's application role (caller must be an admin).
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.api.deps import db_session
from zap_gateway.auth.deps import require_admin
from zap_gateway.auth.models import Principal
from zap_gateway.db.models import RoleName
from zap_gateway.services.roles import RoleService

router = APIRouter(prefix="/v1/admin", tags=["admin"])


class RoleUpdateRequest(BaseModel):
    role: RoleName


@router.put("/users/{user_id}/role")
async def update_user_role(
    user_id: uuid.UUID,
    body: RoleUpdateRequest,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    return await RoleService(session=session).update_role(
        user_id=user_id, role=body.role, actor=principal.subject
    )
