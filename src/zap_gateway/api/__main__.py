"""
zap_gateway.api.__main__

Entrypoint for running the gateway via `python -m zap_gateway.api`.
"""

from __future__ import annotations

import uvicorn

from zap_gateway.api.app import create_app
from zap_gateway.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
