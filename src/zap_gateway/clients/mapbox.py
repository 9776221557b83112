"""
zap_gateway.clients.mapbox

Reverse geocoding through the Mapbox Geocoding API.

Responsibilities:
- Turn a latitude/longitude pair into city/region/country names.
- Report empty results as `NotFoundError`.
"""

from __future__ import annotations

from typing import Any

import httpx

from zap_gateway.clients.http import ensure_success, json_body, require_credential, send
from zap_gateway.errors import NotFoundError, ValidationError
from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)

GEOCODING_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{longitude},{latitude}.json"


class MapboxGeocoder:
    def __init__(self, *, access_token: str | None, http: httpx.AsyncClient) -> None:
        self._access_token = access_token
        self._http = http

    async def reverse(self, *, latitude: float | None, longitude: float | None) -> dict[str, Any]:
        if latitude is None or longitude is None:
            raise ValidationError("Latitude and longitude are required")
        token = require_credential(self._access_token, name="Mapbox key")

        r = await send(
            self._http,
            "GET",
            GEOCODING_URL.format(longitude=longitude, latitude=latitude),
            service="mapbox",
            params={
                "access_token": token,
                "types": "place,region,country",
                "language": "en",
            },
        )
        ensure_success(r, service="mapbox", error=f"Mapbox API error: {r.reason_phrase}")

        data = json_body(r, service="mapbox", error="Mapbox API error")
        features: list[dict[str, Any]] = data.get("features") or []
        if not features:
            raise NotFoundError("Location not found")

        location = {
            "city": _text_of(features, "place"),
            "region": _text_of(features, "region"),
            "country": _text_of(features, "country"),
            "formatted": features[0].get("place_name", ""),
            "context": features[0].get("context") or [],
            "coordinates": {"longitude": longitude, "latitude": latitude},
            "raw_features": features,
        }
        log.info(
            "geocode.resolved",
            query=f"{longitude},{latitude}",
            city=location["city"],
            country=location["country"],
        )
        return location


def _text_of(features: list[dict[str, Any]], place_type: str) -> str:
    # Mapbox lists the most specific feature first; each carries its own place_type.
    for feature in features:
        types = feature.get("place_type") or []
        if types and types[0] == place_type:
            return feature.get("text", "")
    return ""
