"""
zap_gateway.api.routers.relay

Webhook relay endpoints.

Responsibilities:
- `/api/process-trip`: forward trip payloads to the single trip-processing webhook.
- `/functions/v1/make-webhook/{type}`: forward payloads to the webhook configured
  for the trip type (zaptrip, zapout, zaproad, blog).

Bodies are read raw and decoded by the relay, so a JSON payload sent as `text/plain`
(as `navigator.sendBeacon` does) is still forwarded.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from zap_gateway.api.deps import make_webhook_relay, process_trip_relay
from zap_gateway.clients.webhook_relay import WebhookRelay

router = APIRouter(tags=["relay"])


@router.post("/api/process-trip")
async def process_trip(
    request: Request,
    relay: WebhookRelay = Depends(process_trip_relay),
) -> dict[str, Any]:
    return await relay.forward("process-trip", await request.body())


@router.post("/functions/v1/make-webhook/{webhook_type}")
async def make_webhook(
    webhook_type: str,
    request: Request,
    relay: WebhookRelay = Depends(make_webhook_relay),
) -> dict[str, Any]:
    return await relay.forward(webhook_type, await request.body())


# --- Module Notes -----------------------------------------------------------
# OPTIONS never reaches these routes (answered by `CorsMiddleware`); other methods get
# a 405 envelope from `api.errors`.
