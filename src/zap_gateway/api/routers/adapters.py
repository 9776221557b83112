"""
zap_gateway.api.routers.adapters

Third-party adapter endpoints (one outbound call each).

Responsibilities:
- Parse the small JSON request of each adapter.
- Delegate to the adapter class and return its shaped response.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_200_OK, HTTP_400_BAD_REQUEST

from zap_gateway.api.deps import (
    captcha_verifier,
    geocoder,
    image_search,
    location_describer,
    places,
    settings_dep,
)
from zap_gateway.clients.google_places import GooglePlaces
from zap_gateway.clients.http import require_credential
from zap_gateway.clients.location_details import LocationDescriber
from zap_gateway.clients.mapbox import MapboxGeocoder
from zap_gateway.clients.recaptcha import RecaptchaVerifier
from zap_gateway.clients.unsplash import UnsplashImageSearch
from zap_gateway.settings import Settings

router = APIRouter(tags=["adapters"])


class GeocodeRequest(BaseModel):
    latitude: float | None = None
    longitude: float | None = None


class QueryRequest(BaseModel):
    query: str | None = None


class LocationRequest(BaseModel):
    location: str | None = None


class CaptchaRequest(BaseModel):
    token: str | None = None


class LatLng(BaseModel):
    lat: float
    lng: float


class PlacesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: str | None = None
    query: str | None = None
    location: LatLng | None = None
    radius: int = Field(default=5000, ge=1, le=50_000)
    types: str | None = None
    language: str = "en"
    place_id: str | None = Field(default=None, alias="placeId")
    fields: str | None = None
    photo_reference: str | None = Field(default=None, alias="photoReference")
    max_width: int | None = Field(default=800, alias="maxWidth", ge=1, le=1600)
    max_height: int | None = Field(default=600, alias="maxHeight", ge=1, le=1600)


@router.post("/functions/v1/geocode")
async def geocode(
    body: GeocodeRequest,
    client: MapboxGeocoder = Depends(geocoder),
) -> dict[str, Any]:
    return await client.reverse(latitude=body.latitude, longitude=body.longitude)


@router.post("/api/unsplash-image")
async def unsplash_image(
    body: QueryRequest,
    client: UnsplashImageSearch = Depends(image_search),
) -> dict[str, Any]:
    return await client.find(query=body.query)


@router.post("/api/location-details")
async def location_details(
    body: LocationRequest,
    client: LocationDescriber = Depends(location_describer),
) -> dict[str, Any]:
    return await client.describe(location=body.location)


@router.post("/functions/v1/verify-recaptcha")
async def verify_recaptcha(
    body: CaptchaRequest,
    client: RecaptchaVerifier = Depends(captcha_verifier),
) -> JSONResponse:
    result = await client.verify(token=body.token)
    return JSONResponse(
        result.to_payload(),
        status_code=HTTP_200_OK if result.success else HTTP_400_BAD_REQUEST,
    )


@router.post("/functions/v1/google-places-search")
async def google_places_search(
    body: PlacesRequest,
    client: GooglePlaces = Depends(places),
) -> dict[str, Any] | str:
    return await client.dispatch(
        body.action,
        query=body.query,
        location=body.location.model_dump() if body.location else None,
        radius=body.radius,
        types=body.types,
        language=body.language,
        place_id=body.place_id,
        fields=body.fields,
        photo_reference=body.photo_reference,
        max_width=body.max_width,
        max_height=body.max_height,
    )


@router.api_route("/functions/v1/get-mapbox-key", methods=["GET", "POST"])
async def get_mapbox_key(settings: Settings = Depends(settings_dep)) -> dict[str, str]:
    # The browser map needs a public token; the value is the same one the geocoder uses.
    return {"key": require_credential(settings.mapbox_key, name="Mapbox key")}
