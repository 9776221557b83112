"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.
"""

from __future__ import annotations

import pytest

from zap_gateway.observability.logging import _mask_secrets
from tests.conftest import Gateway


@pytest.mark.asyncio
async def test_health_endpoints(gateway: Gateway) -> None:
    r = await gateway.client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await gateway.client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"
    integrations = r.json()["integrations"]
    assert integrations["mapbox"] is True
    assert integrations["zaproad_webhook"] is False


@pytest.mark.asyncio
async def test_request_id_is_echoed(gateway: Gateway) -> None:
    r = await gateway.client.get("/healthz", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(gateway: Gateway) -> None:
    r = await gateway.client.post("/nope", json={})
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}
    assert r.headers["access-control-allow-origin"] == "*"


def test_credentials_are_masked_in_log_events() -> None:
    mask = _mask_secrets({"access_token", "Authorization"})

    event = mask(None, "info", {"event": "x", "access_token": "pk.123", "authorization": "Bearer"})

    assert event == {"event": "x", "access_token": "***", "authorization": "***"}
