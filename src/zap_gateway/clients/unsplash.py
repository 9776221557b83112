"""
zap_gateway.clients.unsplash

Destination photo lookup through the Unsplash search API.
"""

from __future__ import annotations

from typing import Any

import httpx

from zap_gateway.clients.http import ensure_success, json_body, require_credential, send
from zap_gateway.errors import NotFoundError, ValidationError

SEARCH_URL = "https://api.unsplash.com/search/photos"


class UnsplashImageSearch:
    def __init__(self, *, access_key: str | None, http: httpx.AsyncClient) -> None:
        self._access_key = access_key
        self._http = http

    async def find(self, *, query: str | None) -> dict[str, Any]:
        if not query:
            raise ValidationError("Query is required")
        key = require_credential(self._access_key, name="Unsplash access key")

        r = await send(
            self._http,
            "GET",
            SEARCH_URL,
            service="unsplash",
            params={
                "query": f"{query} landmark travel destination",
                "orientation": "landscape",
                "per_page": 1,
            },
            headers={"Authorization": f"Client-ID {key}", "Accept-Version": "v1"},
        )
        ensure_success(r, service="unsplash", error="Failed to fetch image")

        data = json_body(r, service="unsplash", error="Failed to fetch image")
        results = data.get("results") or []
        if not results:
            raise NotFoundError("No image found")

        photo = results[0]
        user = photo.get("user") or {}
        return {
            "url": (photo.get("urls") or {}).get("regular"),
            "credit": {
                "name": user.get("name"),
                "link": (user.get("links") or {}).get("html"),
            },
        }
