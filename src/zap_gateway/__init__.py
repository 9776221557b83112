"""
zap_gateway

Server-side gateway for the trip-planning app: webhook relays, third-party API
adapters and row-level sync handlers over the managed Postgres backend.
"""

__version__ = "0.1.0"
