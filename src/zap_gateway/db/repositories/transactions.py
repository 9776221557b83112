"""
zap_gateway.db.repositories.transactions

Repository for `AppStoreTransaction` rows (append-only).
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.db.models import AppStoreTransaction


class TransactionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        transaction_id: str,
        product_id: str,
        purchase_date: datetime,
        user_id: uuid.UUID,
    ) -> AppStoreTransaction:
        tx = AppStoreTransaction(
            transaction_id=transaction_id,
            product_id=product_id,
            purchase_date=purchase_date,
            user_id=user_id,
            status="completed",
        )
        self._session.add(tx)
        await self._session.flush()
        return tx
