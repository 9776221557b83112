"""
zap_gateway.db.init_db

DB initialization helper (dev/test convenience).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from zap_gateway.db import models  # noqa: F401  # register tables on Base.metadata
from zap_gateway.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create the mirrored tables if they don't exist.
    Managed environments already have them; the backend owns schema changes.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
