"""
zap_gateway.clients.google_places

Google Places web service adapter (text search, autocomplete, details, photo URLs).

Google reports most failures in the body `status` field with HTTP 200, so the body
status is mapped onto the error taxonomy here:
- OK / ZERO_RESULTS -> success (ZERO_RESULTS yields an empty list)
- NOT_FOUND         -> NotFoundError
- OVER_QUERY_LIMIT  -> UpstreamError(429)
- anything else     -> UpstreamError(502)
"""

from __future__ import annotations

from typing import Any

import httpx
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from zap_gateway.clients.http import ensure_success, json_body, require_credential, send
from zap_gateway.errors import NotFoundError, UpstreamError, ValidationError
from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)

BASE_URL = "https://maps.googleapis.com/maps/api/place"

DEFAULT_DETAIL_FIELDS = (
    "place_id,name,formatted_address,geometry,types,photos,rating,user_ratings_total,"
    "opening_hours,website,international_phone_number,reviews"
)


class GooglePlaces:
    def __init__(self, *, api_key: str | None, http: httpx.AsyncClient) -> None:
        self._api_key = api_key
        self._http = http

    async def dispatch(
        self,
        action: str | None,
        *,
        query: str | None = None,
        location: dict[str, float] | None = None,
        radius: int = 5000,
        types: str | None = None,
        language: str = "en",
        place_id: str | None = None,
        fields: str | None = None,
        photo_reference: str | None = None,
        max_width: int | None = 800,
        max_height: int | None = 600,
    ) -> dict[str, Any] | str:
        if not action:
            raise ValidationError(
                'Action is required: "search", "autocomplete", "details" or "photo"'
            )
        if action == "details":
            return await self.details(
                place_id=place_id, fields=fields or DEFAULT_DETAIL_FIELDS, language=language
            )
        if action == "photo":
            return self.photo(
                photo_reference=photo_reference, max_width=max_width, max_height=max_height
            )
        if action in ("search", "autocomplete"):
            lookup = self.search if action == "search" else self.autocomplete
            return await lookup(
                query=query, location=location, radius=radius, types=types, language=language
            )
        raise ValidationError(f"Unknown action: {action}")

    async def search(
        self,
        *,
        query: str | None = None,
        location: dict[str, float] | None = None,
        radius: int = 5000,
        types: str | None = None,
        language: str = "en",
    ) -> dict[str, Any]:
        if not query:
            raise ValidationError("Query is required for place search")
        params = _area_params(location, radius) | {"query": query, "language": language}
        if types:
            params["type"] = types
        data = await self._get("textsearch", params, allow_empty=True)
        return {
            "status": data["status"],
            "results": data.get("results") or [],
            "next_page_token": data.get("next_page_token"),
        }

    async def autocomplete(
        self,
        *,
        query: str | None = None,
        location: dict[str, float] | None = None,
        radius: int = 5000,
        types: str | None = None,
        language: str = "en",
    ) -> dict[str, Any]:
        if not query:
            raise ValidationError("Query is required for place autocomplete")
        params = _area_params(location, radius) | {"input": query, "language": language}
        if types:
            params["types"] = types
        data = await self._get("autocomplete", params, allow_empty=True)
        return {"status": data["status"], "predictions": data.get("predictions") or []}

    async def details(
        self,
        *,
        place_id: str | None = None,
        fields: str = DEFAULT_DETAIL_FIELDS,
        language: str = "en",
    ) -> dict[str, Any]:
        if not place_id:
            raise ValidationError("Place ID is required for place details")
        data = await self._get(
            "details",
            {"place_id": place_id, "fields": fields, "language": language},
            allow_empty=False,
        )
        return {"status": data["status"], "result": data.get("result")}

    def photo(
        self,
        *,
        photo_reference: str | None = None,
        max_width: int | None = 800,
        max_height: int | None = 600,
    ) -> str:
        # No outbound call: the client loads the image from Google's CDN directly.
        if not photo_reference:
            raise ValidationError("Photo reference is required for place photo")
        key = require_credential(self._api_key, name="Google API key")
        params: dict[str, Any] = {"photoreference": photo_reference, "key": key}
        if max_width:
            params["maxwidth"] = max_width
        if max_height:
            params["maxheight"] = max_height
        return str(httpx.URL(f"{BASE_URL}/photo", params=params))

    async def _get(
        self, endpoint: str, params: dict[str, Any], *, allow_empty: bool
    ) -> dict[str, Any]:
        key = require_credential(self._api_key, name="Google API key")
        r = await send(
            self._http,
            "GET",
            f"{BASE_URL}/{endpoint}/json",
            service="google_places",
            params=params | {"key": key},
        )
        ensure_success(r, service="google_places", error="Google Places API error")

        data = json_body(r, service="google_places", error="Google Places API error")
        status = data.get("status", "UNKNOWN_ERROR")
        if status == "OK" or (allow_empty and status == "ZERO_RESULTS"):
            return data

        message = data.get("error_message") or "Unknown error"
        log.error("google_places.status", endpoint=endpoint, status=status, message=message)
        if status in ("NOT_FOUND", "ZERO_RESULTS"):
            raise NotFoundError("Place not found")
        if status == "OVER_QUERY_LIMIT":
            raise UpstreamError(
                "Google Places rate limit exceeded",
                details=message,
                status_code=HTTP_429_TOO_MANY_REQUESTS,
            )
        raise UpstreamError(f"Google Places API error: {status}", details=message)


def _area_params(location: dict[str, float] | None, radius: int) -> dict[str, Any]:
    if not location:
        return {}
    return {"location": f"{location['lat']},{location['lng']}", "radius": radius}
