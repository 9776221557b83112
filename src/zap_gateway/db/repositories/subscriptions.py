from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.db.models import UserSubscription


class SubscriptionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: uuid.UUID) -> UserSubscription | None:
        stmt = select(UserSubscription).where(UserSubscription.user_id == user_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def upsert(
        self,
        *,
        user_id: uuid.UUID,
        product_id: str,
        transaction_id: str,
        purchase_date: datetime,
        status: str = "active",
    ) -> UserSubscription:
        # One subscription row per user; a newer purchase replaces the previous one.
        sub = await self.get(user_id)
        if sub is None:
            sub = UserSubscription(user_id=user_id)
            self._session.add(sub)
        sub.product_id = product_id
        sub.transaction_id = transaction_id
        sub.purchase_date = purchase_date
        sub.status = status
        await self._session.flush()
        return sub
