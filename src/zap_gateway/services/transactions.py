"""
zap_gateway.services.transactions

Store App Store purchases and reflect them on the user's subscription.

Responsibilities:
- Insert the transaction (authoritative; failure aborts).
- Upsert `user_subscriptions` for the user (best-effort).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.db.repositories.subscriptions import SubscriptionRepo
from zap_gateway.db.repositories.transactions import TransactionRepo
from zap_gateway.errors import ValidationError
from zap_gateway.observability.logging import get_logger
from zap_gateway.services.write_plan import WritePlan, WriteStep

log = get_logger(__name__)


class TransactionService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session

    async def store(
        self,
        *,
        transaction_id: str | None,
        product_id: str | None,
        purchase_date: datetime,
        user_id: uuid.UUID | None,
    ) -> dict[str, Any]:
        if not transaction_id or not product_id or user_id is None:
            raise ValidationError("Missing required fields")

        async def insert_transaction(session: AsyncSession) -> dict[str, str]:
            tx = await TransactionRepo(session).add(
                transaction_id=transaction_id,
                product_id=product_id,
                purchase_date=purchase_date,
                user_id=user_id,
            )
            # Snapshot now: a rollback of a later step expires the ORM instance.
            return tx.to_dict()

        async def upsert_subscription(session: AsyncSession) -> None:
            await SubscriptionRepo(session).upsert(
                user_id=user_id,
                product_id=product_id,
                transaction_id=transaction_id,
                purchase_date=purchase_date,
            )

        plan = WritePlan(
            [
                WriteStep(
                    "transaction",
                    insert_transaction,
                    required=True,
                    failure_message="Failed to store transaction",
                ),
                WriteStep("subscription", upsert_subscription, required=False),
            ]
        )
        outcomes = await plan.execute(self._session)
        transaction: dict[str, str] = outcomes[0].value

        log.info(
            "appstore.transaction_stored",
            transaction_id=transaction_id,
            user_id=str(user_id),
            subscription_updated=outcomes[1].ok,
        )
        return {
            "success": True,
            "transaction": transaction,
            "message": "Transaction stored successfully",
        }
