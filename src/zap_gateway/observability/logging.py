"""
zap_gateway.observability.logging

structlog setup for the gateway: one JSON object per line on stdout.

Third-party credentials travel in query strings (Mapbox) and headers (Unsplash, OpenAI),
so two things are enforced here:
- httpx's own request logging is held at WARNING (it logs full URLs at INFO).
- Any event key that names a credential is masked before rendering.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import Any

import structlog

_NOISY_LOGGERS = ("httpx", "httpcore", "openai")
_SECRET_KEYS = frozenset({"access_token", "authorization", "api_key", "secret", "key", "token"})
_MASK = "***"


def configure_logging(*, service_name: str, level: str) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _stamp(service=service_name),
            _mask_secrets(_SECRET_KEYS),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _stamp(**fields: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for k, v in fields.items():
            event_dict.setdefault(k, v)
        return event_dict

    return processor


def _mask_secrets(keys: Iterable[str]):
    lowered = frozenset(k.lower() for k in keys)

    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for k in list(event_dict):
            if k.lower() in lowered and event_dict[k]:
                event_dict[k] = _MASK
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
