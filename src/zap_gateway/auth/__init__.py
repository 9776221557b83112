"""
zap_gateway.auth

Bearer-token verification for admin endpoints.

Responsibilities:
- JWT helpers and validation (tokens come from the managed auth provider).
- FastAPI dependencies (Principal + admin check).
"""

# Package marker.
