"""
zap_gateway.clients

Outbound HTTP boundary.

Responsibilities:
- Webhook relay and third-party API adapters (one external call each).
- Shared helpers that map transport and status failures onto `UpstreamError`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers depend on these classes, never on httpx directly.
