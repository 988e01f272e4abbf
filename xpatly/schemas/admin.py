"""
Pydantic schemas for the admin moderation endpoints.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from xpatly.models.admin_action import AdminActionType, AdminTargetType
from xpatly.models.flagged_content import FlagAction
from xpatly.schemas.listing import ListingResponse


class RejectListingRequest(BaseModel):
    # Blank reasons are rejected by the moderation service with a 400
    reason: Optional[str] = Field(None, max_length=1000)


class UserApprovalRequest(BaseModel):
    is_approved: bool


class UserRejectRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class UserBanRequest(BaseModel):
    is_banned: bool
    reason: Optional[str] = Field(None, max_length=1000)


class UserVerifyRequest(BaseModel):
    is_verified: bool


class UserRoleRequest(BaseModel):
    # Plain string so an unknown role is reported as a 400
    role: str = Field(..., examples=["moderator"])


class ModerationResult(BaseModel):
    """Response of every admin mutation."""

    success: bool = True
    message: str
    action_id: str


class AdminActionResponse(BaseModel):
    id: str
    admin_id: str
    action_type: AdminActionType
    target_type: AdminTargetType
    target_id: str
    reason: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime


class FlaggedContentResponse(BaseModel):
    id: str
    listing_id: str
    reason: str
    flagged_text: Optional[str] = None
    reviewed: bool
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    action_taken: Optional[FlagAction] = None
    created_at: datetime
    listing: Optional[ListingResponse] = None


class DashboardStats(BaseModel):
    total_listings: int
    pending_listings: int
    active_listings: int
    flagged_content: int = Field(..., description="Unreviewed flags")
    total_users: int
    listings_by_status: Dict[str, int]


class PendingListingsResponse(BaseModel):
    listings: List[ListingResponse]
    count: int
