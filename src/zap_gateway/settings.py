"""
zap_gateway.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all handlers.
- Hold the webhook URL table and third-party credentials; all of them optional so
  a missing value is reported per request, never at process start.
- Hide secrets from repr/logging.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Keys accepted by the keyed relay (`/functions/v1/make-webhook/{type}`).
WEBHOOK_TYPES: tuple[str, ...] = ("zaptrip", "zapout", "zaproad", "blog")


class Settings(BaseSettings):
    """
    - Strict env-driven configuration (prefix `ZAP_`)
    - Defaults safe for local dev
    - Single settings object injected into every handler
    """

    model_config = SettingsConfigDict(env_prefix="ZAP_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "zap-gateway"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth: bearer tokens issued by the managed auth provider.
    jwt_alg: str = "HS256"
    jwt_issuer: str = "zap-gateway"
    jwt_audience: str = "authenticated"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./zap.db"

    # Outbound HTTP
    outbound_timeout_seconds: float = 30.0

    # Webhook relay targets
    make_webhook: str | None = Field(default=None, repr=False)
    make_zaptrip_webhook: str | None = Field(default=None, repr=False)
    make_zapout_webhook: str | None = Field(default=None, repr=False)
    make_zaproad_webhook: str | None = Field(default=None, repr=False)
    make_blog_webhook: str | None = Field(default=None, repr=False)

    # Third-party credentials
    mapbox_key: str | None = Field(default=None, repr=False)
    captcha_key: str | None = Field(default=None, repr=False)
    openai_api_key: str | None = Field(default=None, repr=False)
    openai_model: str = "gpt-3.5-turbo"
    unsplash_access_key: str | None = Field(default=None, repr=False)
    google_place_api_key: str | None = Field(default=None, repr=False)

    # CORS
    cors_allow_origin: str = "*"
    cors_allow_methods: str = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
    cors_allow_headers: str = "authorization, x-client-info, apikey, content-type"

    def process_trip_targets(self) -> dict[str, str | None]:
        return {"process-trip": self.make_webhook}

    def webhook_targets(self) -> dict[str, str | None]:
        return {key: getattr(self, f"make_{key}_webhook") for key in WEBHOOK_TYPES}

    def integrations(self) -> dict[str, bool]:
        # Presence only; values are never exposed.
        configured = {
            "process_trip_webhook": self.make_webhook,
            "mapbox": self.mapbox_key,
            "recaptcha": self.captcha_key,
            "openai": self.openai_api_key,
            "unsplash": self.unsplash_access_key,
            "google_places": self.google_place_api_key,
        }
        configured.update({f"{k}_webhook": v for k, v in self.webhook_targets().items()})
        return {name: bool(value) for name, value in configured.items()}

    def cors_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": self.cors_allow_methods,
            "Access-Control-Allow-Headers": self.cors_allow_headers,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Empty strings in the environment are treated like missing values by the relay and
# adapters, so `ZAP_MAPBOX_KEY=` behaves the same as leaving it unset.
