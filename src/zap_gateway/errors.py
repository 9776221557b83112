"""
zap_gateway.errors

Error taxonomy shared by relays, adapters and sync services.

Responsibilities:
- Define typed failures with their HTTP status.
- Render each failure as the standard `{error, details?}` envelope.
"""

from __future__ import annotations

from typing import Any

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)


class GatewayError(Exception):
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(GatewayError):
    status_code = HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConfigurationError(GatewayError):
    default_message = "Server configuration error"


class UpstreamError(GatewayError):
    """
    Non-success answer (or no answer) from an external API.
    The status is passed through to the caller.
    """

    status_code = HTTP_502_BAD_GATEWAY
    default_message = "Upstream service error"


class MethodNotAllowedError(GatewayError):
    status_code = HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


class NotFoundError(GatewayError):
    status_code = HTTP_404_NOT_FOUND
    default_message = "Not found"


class StoreError(GatewayError):
    default_message = "Database error"


# --- Module Notes -----------------------------------------------------------
# Only `api.errors` turns these into HTTP responses; everything below the API layer
# raises them and lets them propagate.
