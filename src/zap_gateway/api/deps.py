"""
zap_gateway.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the settings and shared HTTP client created by `create_app`.
- Provide request-scoped DB sessions.
- Construct each relay/adapter from explicit configuration, per request.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from zap_gateway.clients.google_places import GooglePlaces
from zap_gateway.clients.location_details import LocationDescriber
from zap_gateway.clients.mapbox import MapboxGeocoder
from zap_gateway.clients.recaptcha import RecaptchaVerifier
from zap_gateway.clients.unsplash import UnsplashImageSearch
from zap_gateway.clients.webhook_relay import WebhookRelay
from zap_gateway.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The settings instance is fixed at app construction (see `api.app.create_app`).
    return request.app.state.settings  # type: ignore[attr-defined]


def http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def process_trip_relay(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(http_client),
) -> WebhookRelay:
    return WebhookRelay(
        targets=settings.process_trip_targets(),
        http=http,
        failure_message="Failed to process trip data",
    )


def make_webhook_relay(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(http_client),
) -> WebhookRelay:
    return WebhookRelay(
        targets=settings.webhook_targets(),
        http=http,
        failure_message="Failed to send data to webhook",
    )


def geocoder(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(http_client),
) -> MapboxGeocoder:
    return MapboxGeocoder(access_token=settings.mapbox_key, http=http)


def image_search(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(http_client),
) -> UnsplashImageSearch:
    return UnsplashImageSearch(access_key=settings.unsplash_access_key, http=http)


def location_describer(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(http_client),
) -> LocationDescriber:
    return LocationDescriber(
        api_key=settings.openai_api_key, model=settings.openai_model, http=http
    )


def captcha_verifier(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(http_client),
) -> RecaptchaVerifier:
    return RecaptchaVerifier(secret_key=settings.captcha_key, http=http)


def places(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(http_client),
) -> GooglePlaces:
    return GooglePlaces(api_key=settings.google_place_api_key, http=http)


# --- Module Notes -----------------------------------------------------------
# Handlers hold no state between requests; building them per request keeps every
# credential lookup at call time.
