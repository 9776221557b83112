"""
zap_gateway.services

Service layer (transaction owners).

Responsibilities:
- Multi-table write plans (email sync, App Store transactions).
- Role assignment.
"""

# Package marker.
