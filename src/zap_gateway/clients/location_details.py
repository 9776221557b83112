"""
zap_gateway.clients.location_details

Short destination blurbs generated by an OpenAI chat model.

Responsibilities:
- Build the prompt and issue exactly one completion (SDK retries disabled).
- Parse the model's JSON answer into `{name, country, description}`.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from zap_gateway.clients.http import require_credential
from zap_gateway.errors import UpstreamError, ValidationError
from zap_gateway.observability.logging import get_logger

log = get_logger(__name__)

RESPONSE_FIELDS = ("name", "country", "description")

PROMPT_TEMPLATE = (
    "Generate a short, engaging description for {location} as a travel destination. "
    "Return the response in JSON format with the following fields:\n"
    "- name: The main city/location name\n"
    "- country: The country name\n"
    "- description: A 1-2 sentence engaging description of the location\n"
    "Keep the description under 100 characters."
)


class LocationDescriber:
    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        http: httpx.AsyncClient,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._http = http

    def _client(self) -> AsyncOpenAI:
        key = require_credential(self._api_key, name="OpenAI API key")
        return AsyncOpenAI(api_key=key, http_client=self._http, max_retries=0)

    async def describe(self, *, location: str | None) -> dict[str, Any]:
        if not location:
            raise ValidationError("Location is required")
        client = self._client()

        try:
            completion = await client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": PROMPT_TEMPLATE.format(location=location)}],
            )
        except openai.APIStatusError as e:
            log.error("openai.failed", status=e.status_code, body=e.message)
            raise UpstreamError(
                "Failed to get location details", details=e.message, status_code=e.status_code
            ) from e
        except openai.APIConnectionError as e:
            log.error("openai.unreachable", error=repr(e))
            raise UpstreamError("Failed to get location details", details=str(e)) from e

        content = completion.choices[0].message.content if completion.choices else None
        try:
            details = json.loads(content or "{}")
        except json.JSONDecodeError as e:
            log.error("openai.invalid_json", content=content)
            raise UpstreamError(
                "Failed to get location details", details="Model returned invalid JSON"
            ) from e
        if not isinstance(details, dict):
            raise UpstreamError(
                "Failed to get location details", details="Model returned invalid JSON"
            )
        return _shape(details)


def _shape(details: dict[str, Any]) -> dict[str, str]:
    missing = [k for k in RESPONSE_FIELDS if not isinstance(details.get(k), str)]
    if missing:
        log.error("openai.incomplete_answer", missing=missing, keys=sorted(details))
        raise UpstreamError(
            "Failed to get location details",
            details=f"Model answer is missing {', '.join(missing)}",
        )
    return {k: details[k] for k in RESPONSE_FIELDS}
