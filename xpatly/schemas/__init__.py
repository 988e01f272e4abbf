"""
Pydantic schemas for request/response validation and serialization.
"""

from xpatly.schemas.user import UserCreate, UserResponse, AdminUserResponse, AdminUserListResponse
from xpatly.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
    CurrentUserResponse,
    RegisterResponse,
)
from xpatly.schemas.listing import (
    ListingSubmission,
    ListingCreateResponse,
    ListingSearchFilters,
    ListingResponse,
    ListingListResponse,
    ListingImageResponse,
    WizardStepResponse,
    WIZARD_STEPS,
)
from xpatly.schemas.admin import (
    RejectListingRequest,
    UserApprovalRequest,
    UserRejectRequest,
    UserBanRequest,
    UserVerifyRequest,
    UserRoleRequest,
    ModerationResult,
    AdminActionResponse,
    FlaggedContentResponse,
    DashboardStats,
    PendingListingsResponse,
)
from xpatly.schemas.notification import (
    NotificationResponse,
    NotificationListResponse,
    SavedSearchCreate,
    SavedSearchResponse,
)
from xpatly.schemas.error import APIErrorResponse, ErrorResponse, ErrorDetail

__all__ = [
    "UserCreate",
    "UserResponse",
    "AdminUserResponse",
    "AdminUserListResponse",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "AccessTokenResponse",
    "CurrentUserResponse",
    "RegisterResponse",
    "ListingSubmission",
    "ListingCreateResponse",
    "ListingSearchFilters",
    "ListingResponse",
    "ListingListResponse",
    "ListingImageResponse",
    "WizardStepResponse",
    "WIZARD_STEPS",
    "RejectListingRequest",
    "UserApprovalRequest",
    "UserRejectRequest",
    "UserBanRequest",
    "UserVerifyRequest",
    "UserRoleRequest",
    "ModerationResult",
    "AdminActionResponse",
    "FlaggedContentResponse",
    "DashboardStats",
    "PendingListingsResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "SavedSearchCreate",
    "SavedSearchResponse",
    "APIErrorResponse",
    "ErrorResponse",
    "ErrorDetail",
]
