"""
zap_gateway.db

SQLAlchemy async persistence: ORM mirrors of backend tables, engine/session
factories and repositories.
"""
