"""
Pydantic schemas for notifications and saved searches.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from xpatly.models.notification import NotificationType
from xpatly.schemas.listing import ListingSearchFilters


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    listing_id: Optional[str] = None
    read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class SavedSearchCreate(BaseModel):
    """Saved search request."""

    name: str = Field(..., min_length=3, max_length=50)
    filters: ListingSearchFilters = Field(default_factory=ListingSearchFilters)
    notify_email: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Name must be at least 3 characters")
        return v


class SavedSearchResponse(BaseModel):
    id: str
    user_id: str
    name: str
    filters: Dict[str, Any]
    notify_email: bool
    created_at: datetime
