"""
zap_gateway.api.app

FastAPI app factory for the gateway.

Responsibilities:
- Build the FastAPI application and register routers, middleware and error handlers.
- Own shared infrastructure for the process lifetime (outbound HTTP client, DB engine).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from zap_gateway import __version__
from zap_gateway.api.errors import register_exception_handlers
from zap_gateway.api.routers.adapters import router as adapters_router
from zap_gateway.api.routers.admin import router as admin_router
from zap_gateway.api.routers.dev_auth import router as dev_auth_router
from zap_gateway.api.routers.health import router as health_router
from zap_gateway.api.routers.relay import router as relay_router
from zap_gateway.api.routers.sync import router as sync_router
from zap_gateway.db.init_db import init_db
from zap_gateway.db.session import create_engine, create_sessionmaker
from zap_gateway.observability.logging import configure_logging, get_logger
from zap_gateway.observability.middleware import CorsMiddleware, RequestContextMiddleware
from zap_gateway.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    `transport` replaces the network layer of the shared outbound client (tests pass an
    `httpx.MockTransport`).
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Managed environments already have the tables.
            await init_db(engine)

        async with httpx.AsyncClient(
            transport=transport,
            timeout=settings.outbound_timeout_seconds,
        ) as http:
            app.state.http = http
            try:
                yield
            finally:
                await engine.dispose()
                log.info("shutdown")

    app = FastAPI(
        title="Zap Gateway",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)
    # Last added runs first: request context wraps CORS so unhandled errors are logged
    # with the request id.
    app.add_middleware(CorsMiddleware, headers=settings.cors_headers())
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router)
    app.include_router(relay_router)
    app.include_router(adapters_router)
    app.include_router(sync_router)
    app.include_router(admin_router)
    app.include_router(dev_auth_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file stays small: app composition lives here; request handling lives in routers
# and the clients/services they construct.
