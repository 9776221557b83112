"""
zap_gateway.clients.http

Helpers shared by every outbound client.

Responsibilities:
- Issue a single request and turn transport failures into `UpstreamError`.
- Turn non-2xx responses into `UpstreamError` carrying the upstream status and text.
- Parse 2xx bodies, treating anything but a JSON object as an `UpstreamError`.
- Check credentials at call time (`ConfigurationError`).
"""

from __future__ import annotations

from typing import Any

import httpx

from zap_gateway.errors import ConfigurationError, UpstreamError
from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)


async def send(
    http: httpx.AsyncClient, method: str, url: str, *, service: str, **kwargs: Any
) -> httpx.Response:
    try:
        return await http.request(method, url, **kwargs)
    except httpx.TransportError as e:
        # URLs may carry credentials in the query string, so only the service is logged.
        log.error("upstream.unreachable", service=service, error=repr(e))
        raise UpstreamError(f"{service} unreachable", details=str(e) or repr(e)) from e


def ensure_success(response: httpx.Response, *, service: str, error: str) -> httpx.Response:
    if response.is_success:
        return response
    text = response.text
    log.error(
        "upstream.failed",
        service=service,
        status=response.status_code,
        body=text,
    )
    raise UpstreamError(error, details=text, status_code=response.status_code)


def json_object(response: httpx.Response) -> dict[str, Any]:
    # Upstream success bodies are not guaranteed to be JSON (Make answers "Accepted").
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def json_body(response: httpx.Response, *, service: str, error: str) -> dict[str, Any]:
    # A 2xx that is not a JSON object (maintenance pages, proxies) is an upstream fault.
    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        log.error("upstream.invalid_body", service=service, body=response.text[:500])
        raise UpstreamError(error, details=f"{service} returned a non-JSON response")
    return data


def require_credential(value: str | None, *, name: str) -> str:
    if not value:
        log.error("config.missing", setting=name)
        raise ConfigurationError(details=f"{name} not configured")
    return value
