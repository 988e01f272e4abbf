"""
Service layer for business logic implementation.
Contains services for authentication, listings, moderation, notifications and error handling.
"""

from .auth import AuthService
from .image import ListingImageService
from .listing import ListingService, SubmissionResult
from .moderation import ModerationService
from .notification import NotificationService, SavedSearchService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "ListingImageService",
    "ListingService",
    "SubmissionResult",
    "ModerationService",
    "NotificationService",
    "SavedSearchService",
    "ErrorHandlerService"
]
