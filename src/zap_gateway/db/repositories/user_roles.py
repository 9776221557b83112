"""
zap_gateway.db.repositories.user_roles

Repository for `UserRole` rows.

Responsibilities:
- Read a user's application role (admin checks).
- Set a role (update-or-insert, last write wins).
- Keep the denormalized email copy in sync.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.db.models import RoleName, UserRole


class UserRoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: uuid.UUID) -> UserRole | None:
        stmt = select(UserRole).where(UserRole.user_id == user_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def role_of(self, user_id: uuid.UUID) -> RoleName | None:
        row = await self.get(user_id)
        return row.role if row is not None else None

    async def set_role(self, user_id: uuid.UUID, role: RoleName) -> UserRole:
        row = await self.get(user_id)
        if row is None:
            row = UserRole(user_id=user_id, role=role)
            self._session.add(row)
        else:
            row.role = role
        await self._session.flush()
        return row

    async def update_email(self, user_id: uuid.UUID, email: str) -> int:
        stmt = update(UserRole).where(UserRole.user_id == user_id).values(email=email)
        result = await self._session.execute(stmt)
        return result.rowcount or 0
