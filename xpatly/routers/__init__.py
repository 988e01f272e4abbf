"""
API route handlers for the Xpatly API.
Provides organized routing for different API endpoints.
"""

from .auth import router as auth_router
from .listings import router as listings_router
from .admin import router as admin_router
from .notifications import router as notifications_router
from .saved_searches import router as saved_searches_router

__all__ = [
    "auth_router",
    "listings_router",
    "admin_router",
    "notifications_router",
    "saved_searches_router",
]
