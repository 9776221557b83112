"""
zap_gateway.api.routers.sync

Row-level write endpoints called by the frontend after auth-side changes.

Responsibilities:
- `/functions/v1/sync-email-change`: copy a new email across user tables.
- `/functions/v1/appstore-store-transaction`: record an App Store purchase.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.api.deps import db_session
from zap_gateway.services.email_sync import EmailSyncService
from zap_gateway.services.transactions import TransactionService

router = APIRouter(prefix="/functions/v1", tags=["sync"])


class EmailChangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: uuid.UUID | None = Field(default=None, alias="userId")
    new_email: str | None = Field(default=None, alias="newEmail", max_length=320)


class TransactionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transaction_id: str | None = Field(default=None, alias="transactionId", max_length=128)
    product_id: str | None = Field(default=None, alias="productId", max_length=128)
    purchase_date: datetime | None = Field(default=None, alias="purchaseDate")
    user_id: uuid.UUID | None = Field(default=None, alias="userId")


def _naive_utc(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(tz=UTC).replace(tzinfo=None)
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


@router.post("/sync-email-change")
async def sync_email_change(
    body: EmailChangeRequest,
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    return await EmailSyncService(session=session).sync(
        user_id=body.user_id, new_email=body.new_email
    )


@router.post("/appstore-store-transaction")
async def store_appstore_transaction(
    body: TransactionRequest,
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    return await TransactionService(session=session).store(
        transaction_id=body.transaction_id,
        product_id=body.product_id,
        purchase_date=_naive_utc(body.purchase_date),
        user_id=body.user_id,
    )
