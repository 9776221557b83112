"""
zap_gateway.api.routers.health

Liveness and readiness probes.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from zap_gateway.api.deps import db_session, settings_dep
from zap_gateway.settings import Settings

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, Any]:
    # Third-party APIs are not probed; missing credentials only fail their own endpoints.
    await session.execute(text("SELECT 1"))
    return {"status": "ready", "integrations": settings.integrations()}
