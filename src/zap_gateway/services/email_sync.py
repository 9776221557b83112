"""
zap_gateway.services.email_sync

Propagate a user's new email address across the tables that keep a copy of it.

Responsibilities:
- Update `profiles.email` (authoritative; a store failure aborts, a missing row does not).
- Update `user_roles.email` and `newsletter_subscriptions.email` (best-effort).
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.db.repositories.newsletter import NewsletterRepo
from zap_gateway.db.repositories.profiles import ProfileRepo
from zap_gateway.db.repositories.user_roles import UserRoleRepo
from zap_gateway.errors import ValidationError
from zap_gateway.observability.logging import get_logger
from zap_gateway.services.write_plan import WritePlan, WriteStep, failed

log = get_logger(__name__)


class EmailSyncService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session

    def plan(self, user_id: uuid.UUID, new_email: str) -> WritePlan:
        async def profile(session: AsyncSession) -> int:
            touched = await ProfileRepo(session).update_email(user_id, new_email)
            if touched == 0:
                # Not an error: the auth-side change already happened, copies still follow.
                log.warning("email_sync.profile_missing", user_id=str(user_id))
            return touched

        async def user_roles(session: AsyncSession) -> int:
            return await UserRoleRepo(session).update_email(user_id, new_email)

        async def newsletter(session: AsyncSession) -> int:
            return await NewsletterRepo(session).update_email(user_id, new_email)

        return WritePlan(
            [
                WriteStep("profile email", profile, required=True),
                WriteStep("user_roles email", user_roles, required=False),
                WriteStep("newsletter subscription email", newsletter, required=False),
            ]
        )

    async def sync(self, *, user_id: uuid.UUID | None, new_email: str | None) -> dict[str, Any]:
        if user_id is None or not new_email:
            raise ValidationError("userId and newEmail are required")

        log.info("email_sync.started", user_id=str(user_id))
        outcomes = await self.plan(user_id, new_email).execute(self._session)

        result: dict[str, Any] = {"success": True, "message": "Email updated in all tables"}
        warnings = failed(outcomes)
        if warnings:
            result["message"] = "Email updated"
            result["warnings"] = [f"Failed to update {name}" for name in warnings]
        log.info("email_sync.completed", user_id=str(user_id), failed_steps=warnings)
        return result
