"""
zap_gateway.clients.recaptcha

Server-side verification of reCAPTCHA tokens.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from zap_gateway.clients.http import ensure_success, json_body, require_credential, send
from zap_gateway.errors import ValidationError

VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


@dataclass(frozen=True, slots=True)
class CaptchaResult:
    success: bool
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return "Verification successful" if self.success else "Verification failed"

    def to_payload(self) -> dict[str, object]:
        return {"success": self.success, "message": self.message, "errors": self.errors}


class RecaptchaVerifier:
    def __init__(self, *, secret_key: str | None, http: httpx.AsyncClient) -> None:
        self._secret_key = secret_key
        self._http = http

    async def verify(self, *, token: str | None) -> CaptchaResult:
        if not token:
            raise ValidationError("Token is required")
        secret = require_credential(self._secret_key, name="CAPTCHA key")

        r = await send(
            self._http,
            "POST",
            VERIFY_URL,
            service="recaptcha",
            data={"secret": secret, "response": token},
        )
        ensure_success(r, service="recaptcha", error="Failed to verify reCAPTCHA")

        body = json_body(r, service="recaptcha", error="Failed to verify reCAPTCHA")
        return CaptchaResult(
            success=bool(body.get("success")),
            errors=list(body.get("error-codes") or []),
        )
