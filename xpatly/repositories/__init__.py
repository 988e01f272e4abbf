"""
Repository layer for data access operations.
"""

from xpatly.repositories.base import BaseRepository
from xpatly.repositories.user import UserRepository
from xpatly.repositories.listing import ListingRepository
from xpatly.repositories.listing_image import ListingImageRepository
from xpatly.repositories.moderation import FlaggedContentRepository, AdminActionRepository
from xpatly.repositories.notification import NotificationRepository, SavedSearchRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ListingRepository",
    "ListingImageRepository",
    "FlaggedContentRepository",
    "AdminActionRepository",
    "NotificationRepository",
    "SavedSearchRepository",
]
