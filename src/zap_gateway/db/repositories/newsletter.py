from __future__ import annotations

import uuid

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.db.models import NewsletterSubscription


class NewsletterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def update_email(self, user_id: uuid.UUID, email: str) -> int:
        stmt = (
            update(NewsletterSubscription)
            .where(NewsletterSubscription.user_id == user_id)
            .values(email=email)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
