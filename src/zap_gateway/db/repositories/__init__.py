"""
zap_gateway.db.repositories

One thin repository per table. Write ordering and failure policy live in
`zap_gateway.services`, never here.
"""

from zap_gateway.db.repositories.newsletter import NewsletterRepo
from zap_gateway.db.repositories.profiles import ProfileRepo
from zap_gateway.db.repositories.subscriptions import SubscriptionRepo
from zap_gateway.db.repositories.transactions import TransactionRepo
from zap_gateway.db.repositories.user_roles import UserRoleRepo

__all__ = [
    "NewsletterRepo",
    "ProfileRepo",
    "SubscriptionRepo",
    "TransactionRepo",
    "UserRoleRepo",
]
