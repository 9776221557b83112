"""
zap_gateway.api.errors

Exception handlers that form the HTTP error boundary.

Responsibilities:
- Render `GatewayError` subclasses as `{error, details?}` with their status.
- Normalize framework errors (405, 401/403/404, body validation) to the same envelope.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse
from starlette.status import HTTP_405_METHOD_NOT_ALLOWED

from zap_gateway.errors import GatewayError, MethodNotAllowedError, ValidationError
from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)


def _render(err: GatewayError) -> JSONResponse:
    return JSONResponse(err.to_payload(), status_code=err.status_code)


async def gateway_error_handler(_: Request, exc: GatewayError) -> JSONResponse:
    log.warning(
        "request.failed",
        error_type=type(exc).__name__,
        status=exc.status_code,
        error=exc.message,
        details=exc.details,
    )
    return _render(exc)


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == HTTP_405_METHOD_NOT_ALLOWED:
        err: GatewayError = MethodNotAllowedError()
    else:
        err = GatewayError(str(exc.detail), status_code=exc.status_code)
    log.warning("request.rejected", status=err.status_code, error=err.message)
    response = _render(err)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '')}" for e in exc.errors()
    )
    err = ValidationError("Invalid request body", details=details)
    log.warning("request.invalid", details=details)
    return _render(err)


def register_exception_handlers(app: FastAPI) -> None:
    handlers = {
        GatewayError: gateway_error_handler,
        StarletteHTTPException: http_exception_handler,
        RequestValidationError: request_validation_handler,
    }
    for exc_class, handler in handlers.items():
        app.add_exception_handler(exc_class, handler)  # type: ignore[arg-type]
