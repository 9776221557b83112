"""
tests.test_adapters

Third-party adapters: request validation, credential checks, response shaping and
upstream error mapping. External APIs are faked with `httpx.MockTransport`.
"""

from __future__ import annotations

import json
from urllib.parse import parse_qs

import httpx
import pytest

from tests.conftest import Gateway, Upstream

MAPBOX_FEATURES = [
    {
        "place_type": ["place"],
        "text": "Lyon",
        "place_name": "Lyon, Rhône, France",
        "context": [{"id": "region.1", "text": "Rhône"}],
    },
    {"place_type": ["region"], "text": "Auvergne-Rhône-Alpes", "place_name": "ARA, France"},
    {"place_type": ["country"], "text": "France", "place_name": "France"},
]


def _completion(content: str) -> dict:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1_700_000_000,
        "model": "gpt-3.5-turbo",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


# --- geocode ----------------------------------------------------------------


@pytest.mark.asyncio
async def test_geocode_shapes_mapbox_features(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(200, json={"features": MAPBOX_FEATURES}))

    r = await gateway.client.post(
        "/functions/v1/geocode", json={"latitude": 45.76, "longitude": 4.83}
    )

    assert r.status_code == 200
    body = r.json()
    assert body["city"] == "Lyon"
    assert body["region"] == "Auvergne-Rhône-Alpes"
    assert body["country"] == "France"
    assert body["formatted"] == "Lyon, Rhône, France"
    assert body["context"] == [{"id": "region.1", "text": "Rhône"}]
    assert body["coordinates"] == {"longitude": 4.83, "latitude": 45.76}

    sent = upstream.requests[0]
    assert sent.url.path == "/geocoding/v5/mapbox.places/4.83,45.76.json"
    assert sent.url.params["access_token"] == "mapbox-test-token"
    assert sent.url.params["types"] == "place,region,country"


@pytest.mark.asyncio
async def test_geocode_zero_coordinates_are_valid(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(200, json={"features": MAPBOX_FEATURES[2:]}))

    r = await gateway.client.post("/functions/v1/geocode", json={"latitude": 0, "longitude": 0})

    assert r.status_code == 200
    assert r.json()["city"] == ""
    assert r.json()["country"] == "France"


@pytest.mark.asyncio
async def test_geocode_requires_both_coordinates(gateway: Gateway, upstream: Upstream) -> None:
    r = await gateway.client.post("/functions/v1/geocode", json={"latitude": 45.76})

    assert r.status_code == 400
    assert r.json() == {"error": "Latitude and longitude are required"}
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_geocode_without_key_is_a_configuration_error(
    gateway_factory, upstream: Upstream
) -> None:
    gw: Gateway = await gateway_factory(mapbox_key=None)

    r = await gw.client.post("/functions/v1/geocode", json={"latitude": 1.0, "longitude": 2.0})

    assert r.status_code == 500
    assert r.json()["error"] == "Server configuration error"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_geocode_no_features_is_not_found(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(200, json={"features": []}))

    r = await gateway.client.post("/functions/v1/geocode", json={"latitude": 1.0, "longitude": 2.0})

    assert r.status_code == 404
    assert r.json() == {"error": "Location not found"}


@pytest.mark.asyncio
async def test_geocode_upstream_error_passes_through(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(401, text="Not Authorized - Invalid Token"))

    r = await gateway.client.post("/functions/v1/geocode", json={"latitude": 1.0, "longitude": 2.0})

    assert r.status_code == 401
    assert r.json()["details"] == "Not Authorized - Invalid Token"


@pytest.mark.asyncio
async def test_geocode_html_success_page_is_bad_gateway(
    gateway: Gateway, upstream: Upstream
) -> None:
    upstream.reply(lambda _: httpx.Response(200, text="<html>maintenance</html>"))

    r = await gateway.client.post("/functions/v1/geocode", json={"latitude": 1.0, "longitude": 2.0})

    assert r.status_code == 502
    assert r.json() == {
        "error": "Mapbox API error",
        "details": "mapbox returned a non-JSON response",
    }


# --- unsplash ---------------------------------------------------------------


@pytest.mark.asyncio
async def test_unsplash_returns_first_photo_with_credit(
    gateway: Gateway, upstream: Upstream
) -> None:
    photo = {
        "urls": {"regular": "https://images.example.test/kyoto.jpg"},
        "user": {"name": "Aiko", "links": {"html": "https://unsplash.com/@aiko"}},
    }
    upstream.reply(lambda _: httpx.Response(200, json={"total": 1, "results": [photo]}))

    r = await gateway.client.post("/api/unsplash-image", json={"query": "Kyoto"})

    assert r.status_code == 200
    assert r.json() == {
        "url": "https://images.example.test/kyoto.jpg",
        "credit": {"name": "Aiko", "link": "https://unsplash.com/@aiko"},
    }
    sent = upstream.requests[0]
    assert sent.headers["authorization"] == "Client-ID unsplash-test-key"
    assert sent.url.params["query"] == "Kyoto landmark travel destination"
    assert sent.url.params["orientation"] == "landscape"
    assert sent.url.params["per_page"] == "1"


@pytest.mark.asyncio
async def test_unsplash_empty_result_is_not_found(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(200, json={"total": 0, "results": []}))

    r = await gateway.client.post("/api/unsplash-image", json={"query": "Atlantis"})

    assert r.status_code == 404
    assert r.json() == {"error": "No image found"}


@pytest.mark.asyncio
async def test_unsplash_rate_limit_is_surfaced(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(403, text="Rate Limit Exceeded"))

    r = await gateway.client.post("/api/unsplash-image", json={"query": "Kyoto"})

    assert r.status_code == 403
    assert r.json() == {"error": "Failed to fetch image", "details": "Rate Limit Exceeded"}


# --- location details (OpenAI) ---------------------------------------------


@pytest.mark.asyncio
async def test_location_details_parses_model_json(gateway: Gateway, upstream: Upstream) -> None:
    content = json.dumps(
        {"name": "Lisbon", "country": "Portugal", "description": "Hills, trams and pastéis."}
    )
    upstream.reply(lambda _: httpx.Response(200, json=_completion(content)))

    r = await gateway.client.post("/api/location-details", json={"location": "Lisbon"})

    assert r.status_code == 200
    assert r.json() == {
        "name": "Lisbon",
        "country": "Portugal",
        "description": "Hills, trams and pastéis.",
    }
    assert len(upstream.requests) == 1
    sent = upstream.requests[0]
    assert sent.url.path.endswith("/chat/completions")
    assert sent.headers["authorization"] == "Bearer sk-test"
    prompt = json.loads(sent.content)["messages"][0]["content"]
    assert "Lisbon" in prompt


@pytest.mark.asyncio
async def test_location_details_invalid_model_output(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(200, json=_completion("Lisbon is lovely")))

    r = await gateway.client.post("/api/location-details", json={"location": "Lisbon"})

    assert r.status_code == 502
    assert r.json() == {
        "error": "Failed to get location details",
        "details": "Model returned invalid JSON",
    }


@pytest.mark.asyncio
async def test_location_details_drops_extra_model_keys(
    gateway: Gateway, upstream: Upstream
) -> None:
    content = json.dumps(
        {"name": "Porto", "country": "Portugal", "description": "Port wine.", "population": 230000}
    )
    upstream.reply(lambda _: httpx.Response(200, json=_completion(content)))

    r = await gateway.client.post("/api/location-details", json={"location": "Porto"})

    assert r.status_code == 200
    assert r.json() == {"name": "Porto", "country": "Portugal", "description": "Port wine."}


@pytest.mark.asyncio
async def test_location_details_incomplete_model_answer(
    gateway: Gateway, upstream: Upstream
) -> None:
    content = json.dumps({"city": "Lisbon", "summary": "x", "population": 500000})
    upstream.reply(lambda _: httpx.Response(200, json=_completion(content)))

    r = await gateway.client.post("/api/location-details", json={"location": "Lisbon"})

    assert r.status_code == 502
    assert r.json() == {
        "error": "Failed to get location details",
        "details": "Model answer is missing name, country, description",
    }


@pytest.mark.asyncio
async def test_location_details_upstream_error_is_not_retried(
    gateway: Gateway, upstream: Upstream
) -> None:
    upstream.reply(
        lambda _: httpx.Response(500, json={"error": {"message": "boom", "type": "server_error"}})
    )

    r = await gateway.client.post("/api/location-details", json={"location": "Lisbon"})

    assert r.status_code == 500
    assert r.json()["error"] == "Failed to get location details"
    assert len(upstream.requests) == 1


@pytest.mark.asyncio
async def test_location_details_requires_location(gateway: Gateway, upstream: Upstream) -> None:
    r = await gateway.client.post("/api/location-details", json={})

    assert r.status_code == 400
    assert r.json() == {"error": "Location is required"}
    assert upstream.requests == []


# --- reCAPTCHA ----------------------------------------------------------------


@pytest.mark.asyncio
async def test_recaptcha_success(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(200, json={"success": True}))

    r = await gateway.client.post("/functions/v1/verify-recaptcha", json={"token": "tok"})

    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Verification successful", "errors": []}
    form = parse_qs(upstream.requests[0].content.decode())
    assert form == {"secret": ["captcha-test-secret"], "response": ["tok"]}


@pytest.mark.asyncio
async def test_recaptcha_rejected_token(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(
        lambda _: httpx.Response(
            200, json={"success": False, "error-codes": ["timeout-or-duplicate"]}
        )
    )

    r = await gateway.client.post("/functions/v1/verify-recaptcha", json={"token": "tok"})

    assert r.status_code == 400
    assert r.json() == {
        "success": False,
        "message": "Verification failed",
        "errors": ["timeout-or-duplicate"],
    }


@pytest.mark.asyncio
async def test_recaptcha_non_json_answer_is_bad_gateway(
    gateway: Gateway, upstream: Upstream
) -> None:
    upstream.reply(lambda _: httpx.Response(200, json=["not", "an", "object"]))

    r = await gateway.client.post("/functions/v1/verify-recaptcha", json={"token": "tok"})

    assert r.status_code == 502
    assert r.json()["error"] == "Failed to verify reCAPTCHA"


@pytest.mark.asyncio
async def test_recaptcha_requires_token(gateway: Gateway) -> None:
    r = await gateway.client.post("/functions/v1/verify-recaptcha", json={})

    assert r.status_code == 400
    assert r.json() == {"error": "Token is required"}


@pytest.mark.asyncio
async def test_recaptcha_is_post_only(gateway: Gateway) -> None:
    r = await gateway.client.get("/functions/v1/verify-recaptcha")

    assert r.status_code == 405
    assert r.json() == {"error": "Method not allowed"}


# --- Google Places ----------------------------------------------------------


@pytest.mark.asyncio
async def test_places_search_zero_results_is_empty(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}))

    r = await gateway.client.post(
        "/functions/v1/google-places-search",
        json={"action": "search", "query": "ramen", "location": {"lat": 1.5, "lng": 2.5}},
    )

    assert r.status_code == 200
    assert r.json() == {"status": "ZERO_RESULTS", "results": [], "next_page_token": None}
    sent = upstream.requests[0]
    assert sent.url.path == "/maps/api/place/textsearch/json"
    assert sent.url.params["location"] == "1.5,2.5"
    assert sent.url.params["radius"] == "5000"
    assert sent.url.params["key"] == "google-test-key"


@pytest.mark.asyncio
async def test_places_rate_limit_is_not_swallowed(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(
        lambda _: httpx.Response(
            200, json={"status": "OVER_QUERY_LIMIT", "error_message": "quota exceeded"}
        )
    )

    r = await gateway.client.post(
        "/functions/v1/google-places-search", json={"action": "autocomplete", "query": "par"}
    )

    assert r.status_code == 429
    assert r.json() == {"error": "Google Places rate limit exceeded", "details": "quota exceeded"}


@pytest.mark.asyncio
async def test_places_details(gateway: Gateway, upstream: Upstream) -> None:
    place = {"place_id": "abc", "name": "Louvre"}
    upstream.reply(lambda _: httpx.Response(200, json={"status": "OK", "result": place}))

    r = await gateway.client.post(
        "/functions/v1/google-places-search", json={"action": "details", "placeId": "abc"}
    )

    assert r.status_code == 200
    assert r.json() == {"status": "OK", "result": place}
    assert upstream.requests[0].url.params["place_id"] == "abc"


@pytest.mark.asyncio
async def test_places_details_not_found(gateway: Gateway, upstream: Upstream) -> None:
    upstream.reply(lambda _: httpx.Response(200, json={"status": "NOT_FOUND"}))

    r = await gateway.client.post(
        "/functions/v1/google-places-search", json={"action": "details", "placeId": "gone"}
    )

    assert r.status_code == 404


@pytest.mark.asyncio
async def test_places_photo_returns_url_without_calling_out(
    gateway: Gateway, upstream: Upstream
) -> None:
    r = await gateway.client.post(
        "/functions/v1/google-places-search",
        json={"action": "photo", "photoReference": "ref-1", "maxWidth": 400},
    )

    assert r.status_code == 200
    url = httpx.URL(r.json())
    assert url.path == "/maps/api/place/photo"
    assert url.params["photoreference"] == "ref-1"
    assert url.params["key"] == "google-test-key"
    assert url.params["maxwidth"] == "400"
    assert url.params["maxheight"] == "600"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_places_photo_without_key_is_a_configuration_error(gateway_factory) -> None:
    gw: Gateway = await gateway_factory(google_place_api_key=None)

    r = await gw.client.post(
        "/functions/v1/google-places-search", json={"action": "photo", "photoReference": "ref"}
    )

    assert r.status_code == 500
    assert r.json()["error"] == "Server configuration error"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "error"),
    [
        ({}, 'Action is required: "search", "autocomplete", "details" or "photo"'),
        ({"action": "photo"}, "Photo reference is required for place photo"),
        ({"action": "teleport"}, "Unknown action: teleport"),
        ({"action": "search"}, "Query is required for place search"),
        ({"action": "details"}, "Place ID is required for place details"),
    ],
)
async def test_places_validation(
    gateway: Gateway, upstream: Upstream, payload: dict, error: str
) -> None:
    r = await gateway.client.post("/functions/v1/google-places-search", json=payload)

    assert r.status_code == 400
    assert r.json() == {"error": error}
    assert upstream.requests == []


# --- map token --------------------------------------------------------------


@pytest.mark.asyncio
async def test_mapbox_key(gateway: Gateway) -> None:
    r = await gateway.client.get("/functions/v1/get-mapbox-key")

    assert r.status_code == 200
    assert r.json() == {"key": "mapbox-test-token"}


@pytest.mark.asyncio
async def test_mapbox_key_missing(gateway_factory) -> None:
    gw: Gateway = await gateway_factory(mapbox_key=None)

    r = await gw.client.post("/functions/v1/get-mapbox-key")

    assert r.status_code == 500
    assert r.json() == {
        "error": "Server configuration error",
        "details": "Mapbox key not configured",
    }
