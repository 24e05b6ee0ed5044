"""SQLAlchemy ORM models."""

from finder.models.activity import ListingView, WhatsappMessageLog
from finder.models.listing import Listing
from finder.models.subscription import TelegramSubscription, WhatsappSubscription
from finder.models.user import User, UserFilter

__all__ = [
    "Listing",
    "ListingView",
    "TelegramSubscription",
    "User",
    "UserFilter",
    "WhatsappMessageLog",
    "WhatsappSubscription",
]
