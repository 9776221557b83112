"""
zap_gateway.db.models

ORM mirror of the backend tables this service writes to.

Responsibilities:
- Map only the columns the gateway reads or writes:
  - Profile: primary record for a user's contact data
  - UserRole: application role per user (denormalized email copy)
  - NewsletterSubscription: mailing list membership (denormalized email copy)
  - AppStoreTransaction: append-only record of App Store purchases
  - UserSubscription: current subscription per user
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Enum, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from zap_gateway.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps; the backend columns are `timestamp without time zone`.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class RoleName(enum.StrEnum):
    # Values mirror the backend `user_role` enum; treat as stable API contract.
    admin = "admin"
    nosubs = "nosubs"
    tier1 = "tier1"
    tier2 = "tier2"
    tier3 = "tier3"
    tier4 = "tier4"
    enterprise = "enterprise"


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the auth provider's user id.
    id: Mapped[uuid.UUID] = mapped_column(SAUuid(as_uuid=True), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    username: Mapped[str | None] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class UserRole(Base):
    __tablename__ = "user_roles"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), nullable=False, unique=True, index=True
    )
    role: Mapped[RoleName] = mapped_column(
        Enum(RoleName, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=RoleName.nosubs,
    )
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class NewsletterSubscription(Base):
    __tablename__ = "newsletter_subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), nullable=True, index=True
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    subscribed: Mapped[bool] = mapped_column(nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class AppStoreTransaction(Base):
    __tablename__ = "appstore_transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    transaction_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    product_id: Mapped[str] = mapped_column(String(128), nullable=False)
    purchase_date: Mapped[datetime] = mapped_column(nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(SAUuid(as_uuid=True), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="completed")

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    def to_dict(self) -> dict[str, str]:
        return {
            "id": str(self.id),
            "transaction_id": self.transaction_id,
            "product_id": self.product_id,
            "purchase_date": self.purchase_date.isoformat(),
            "user_id": str(self.user_id),
            "status": self.status,
            "created_at": self.created_at.isoformat(),
        }


class UserSubscription(Base):
    __tablename__ = "user_subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), nullable=False, unique=True, index=True
    )
    product_id: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    transaction_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    purchase_date: Mapped[datetime | None] = mapped_column(nullable=True)

    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


# --- Module Notes -----------------------------------------------------------
# The backend owns these tables (and their row-level security). `init_db` only creates
# them for local development and tests.
