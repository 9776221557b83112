"""
zap_gateway.services.roles

Admin-only role assignment.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.db.models import RoleName
from zap_gateway.db.repositories.user_roles import UserRoleRepo
from zap_gateway.errors import StoreError
from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)


class RoleService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._roles = UserRoleRepo(session)

    async def is_admin(self, user_id: uuid.UUID) -> bool:
        return await self._roles.role_of(user_id) == RoleName.admin

    async def update_role(
        self, *, user_id: uuid.UUID, role: RoleName, actor: str
    ) -> dict[str, Any]:
        # Concurrent updates for the same user are not coordinated; last commit wins.
        try:
            row = await self._roles.set_role(user_id, role)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.error("roles.update_failed", user_id=str(user_id), error=str(e))
            raise StoreError("Error updating user role", details=str(e)) from e

        log.info("roles.updated", user_id=str(user_id), role=role.value, actor=actor)
        return {"success": True, "user_id": str(row.user_id), "role": row.role.value}
