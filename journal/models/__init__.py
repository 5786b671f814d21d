"""Database models."""

from journal.models.user import User
from journal.models.strategy import Strategy, CustomField
from journal.models.trade import Trade

__all__ = [
    "User",
    "Strategy",
    "CustomField",
    "Trade",
]
