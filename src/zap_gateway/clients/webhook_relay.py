"""
zap_gateway.clients.webhook_relay

Forward a JSON body to a configured webhook URL and normalize the answer.

Responsibilities:
- Resolve the target URL from a key -> URL table.
- Decode the raw request body and POST it as compact JSON, exactly once.
- Map the upstream answer onto `{success: true, ...}` or an `UpstreamError`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx

from zap_gateway.clients.http import ensure_success, json_object, send
from zap_gateway.errors import ConfigurationError, ValidationError
from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)


class WebhookRelay:
    def __init__(
        self,
        *,
        targets: Mapping[str, str | None],
        http: httpx.AsyncClient,
        failure_message: str,
    ) -> None:
        self._targets = {k.lower(): v for k, v in targets.items()}
        self._http = http
        self._failure_message = failure_message

    def resolve(self, key: str | None) -> str:
        if not key:
            raise ValidationError("Webhook type not specified")
        normalized = key.lower()
        if normalized not in self._targets:
            raise ValidationError(f"Unknown webhook type: {key}")
        url = self._targets[normalized]
        if not url:
            log.error("relay.not_configured", webhook=normalized)
            raise ConfigurationError()
        return url

    async def forward(self, key: str | None, raw: bytes) -> dict[str, Any]:
        # Configuration is checked first: a misconfigured relay never calls out.
        url = self.resolve(key)
        body = parse_json(raw)

        response = await send(
            self._http,
            "POST",
            url,
            service="webhook",
            content=json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode(),
            headers={"Content-Type": "application/json"},
        )
        ensure_success(response, service="webhook", error=self._failure_message)

        log.info("relay.forwarded", webhook=key, status=response.status_code)
        return {"success": True, **json_object(response)}


def parse_json(raw: bytes) -> Any:
    """
    Decode a request body whatever its Content-Type. Any JSON value is accepted,
    `null` included; only an absent body is "required".
    """
    if not raw.strip():
        raise ValidationError("Request body is required")
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError("Invalid JSON body", details=str(e)) from e


# --- Module Notes -----------------------------------------------------------
# Nothing is retried here; the calling app owns retries.
