"""
tests.conftest

Shared fixtures: a gateway app wired to a fake network layer and a throwaway SQLite DB.
"""

from __future__ import annotations

import contextlib
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy import text

from zap_gateway.api.app import create_app
from zap_gateway.auth.jwt import JwtConfig, issue_token
from zap_gateway.settings import Settings

Responder = Callable[[httpx.Request], httpx.Response]


@dataclass
class Upstream:
    """
    Stand-in for every external API. Records requests; answers with `responder`.
    """

    requests: list[httpx.Request] = field(default_factory=list)
    responder: Responder = lambda _: httpx.Response(200, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def reply(self, responder: Responder) -> None:
        self.responder = responder


@dataclass
class Gateway:
    app: FastAPI
    client: httpx.AsyncClient
    settings: Settings

    def sessionmaker(self):
        return self.app.state.sessionmaker

    async def execute(self, sql: str) -> None:
        async with self.app.state.engine.begin() as conn:
            await conn.execute(text(sql))

    def bearer(self, user_id: uuid.UUID) -> dict[str, str]:
        token = issue_token(cfg=JwtConfig.from_settings(self.settings), subject=str(user_id))
        return {"Authorization": f"Bearer {token}"}


def make_settings(tmp_path: Path, **overrides: object) -> Settings:
    values: dict[str, object] = {
        "env": "test",
        "log_level": "WARNING",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'zap.db'}",
        "jwt_secret": "test-secret",
        "make_webhook": "https://hook.example.test/process-trip",
        "make_zaptrip_webhook": "https://hook.example.test/zaptrip",
        "make_zapout_webhook": "https://hook.example.test/zapout",
        "mapbox_key": "mapbox-test-token",
        "captcha_key": "captcha-test-secret",
        "openai_api_key": "sk-test",
        "unsplash_access_key": "unsplash-test-key",
        "google_place_api_key": "google-test-key",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest_asyncio.fixture
async def gateway_factory(
    upstream: Upstream, tmp_path: Path
) -> AsyncIterator[Callable[..., Awaitable[Gateway]]]:
    async with contextlib.AsyncExitStack() as stack:

        async def _make(**overrides: object) -> Gateway:
            settings = make_settings(tmp_path, **overrides)
            app = create_app(settings=settings, transport=httpx.MockTransport(upstream))
            # httpx ASGITransport does not run the lifespan; enter it explicitly.
            await stack.enter_async_context(app.router.lifespan_context(app))
            client = await stack.enter_async_context(
                httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
            )
            return Gateway(app=app, client=client, settings=settings)

        yield _make


@pytest_asyncio.fixture
async def gateway(gateway_factory: Callable[..., Awaitable[Gateway]]) -> Gateway:
    return await gateway_factory()
