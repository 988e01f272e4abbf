"""
Database models for the Xpatly API.
Includes users, listings, images and the moderation tables.
"""

from xpatly.models.user import User, UserRole, UserType
from xpatly.models.listing import Listing, ListingStatus, PropertyType
from xpatly.models.listing_image import ListingImage
from xpatly.models.flagged_content import FlaggedContent, FlagAction
from xpatly.models.admin_action import AdminAction, AdminActionType, AdminTargetType
from xpatly.models.notification import Notification, NotificationType
from xpatly.models.saved_search import SavedSearch

__all__ = [
    "User",
    "UserRole",
    "UserType",
    "Listing",
    "ListingStatus",
    "PropertyType",
    "ListingImage",
    "FlaggedContent",
    "FlagAction",
    "AdminAction",
    "AdminActionType",
    "AdminTargetType",
    "Notification",
    "NotificationType",
    "SavedSearch",
]
