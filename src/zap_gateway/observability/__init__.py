"""
zap_gateway.observability

structlog configuration plus the request-id and CORS middlewares.
"""
