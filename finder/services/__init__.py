"""Service layer used by the HTTP API and chatbot tools."""

from finder.services.admin_service import AdminService
from finder.services.auth_service import AuthService
from finder.services.listing_service import ListingService
from finder.services.subscription_service import SubscriptionService
from finder.services.user_service import UserService

__all__ = [
    "AdminService",
    "AuthService",
    "ListingService",
    "SubscriptionService",
    "UserService",
]
