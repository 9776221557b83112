"""
zap_gateway.db.repositories.profiles

Repository for `Profile` rows (primary copy of a user's email).
"""

from __future__ import annotations

import uuid

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.db.models import Profile


class ProfileRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: uuid.UUID) -> Profile | None:
        return await self._session.get(Profile, user_id)

    async def create(self, *, user_id: uuid.UUID, email: str | None = None) -> Profile:
        profile = Profile(id=user_id, email=email)
        self._session.add(profile)
        await self._session.flush()
        return profile

    async def update_email(self, user_id: uuid.UUID, email: str) -> int:
        # Returns the number of rows touched so callers can tell "missing" from "updated".
        stmt = update(Profile).where(Profile.id == user_id).values(email=email)
        result = await self._session.execute(stmt)
        return result.rowcount or 0
