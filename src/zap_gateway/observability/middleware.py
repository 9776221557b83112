"""
zap_gateway.observability.middleware

HTTP middleware shared by every endpoint.

Responsibilities:
- Generate/propagate request IDs and bind them into structlog contextvars.
- Answer CORS preflight requests and stamp CORS headers on every response.
- Convert exceptions nothing else handled into the 500 error envelope.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_200_OK, HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp

from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    - Ensures every request has a request id
    - Binds request-scoped contextvars for structured logs
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        try:
            response: Response = await call_next(request)
        finally:
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


class CorsMiddleware(BaseHTTPMiddleware):
    """
    Permissive CORS for browser callers.

    `OPTIONS` is answered here, before routing, so preflight succeeds even when the
    target endpoint is misconfigured or does not accept OPTIONS itself.
    """

    def __init__(self, app: ASGIApp, *, headers: dict[str, str]) -> None:
        super().__init__(app)
        self._headers = dict(headers)

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=HTTP_200_OK, headers=self._headers)

        try:
            response: Response = await call_next(request)
        except Exception:
            log.exception("request.unhandled_error")
            response = JSONResponse(
                {"error": "Internal server error"},
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            )

        response.headers.update(self._headers)
        return response


# --- Module Notes -----------------------------------------------------------
# Domain errors never reach the except branch above; they are rendered by the
# exception handlers in `api.errors`, which run inside this middleware.
