"""
zap_gateway.api

API package for the gateway.

Responsibilities:
- FastAPI app factory, error boundary and router modules.
- API-layer dependency wiring and request models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request parsing + auth + delegation to clients/services.
