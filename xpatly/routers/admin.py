"""
Admin moderation endpoints. Every route requires a moderator or super admin
that is not banned; every mutation writes one audit row.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import List, Optional
from uuid import UUID

from xpatly.models.user import User
from xpatly.services.moderation import ModerationService
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
from xpatly.schemas.listing import ListingResponse
from xpatly.schemas.user import AdminUserResponse, AdminUserListResponse
from xpatly.schemas.error import get_crud_error_responses, get_auth_error_responses
from xpatly.utils.dependencies import get_current_admin_user, get_moderation_service


router = APIRouter(prefix="/admin", tags=["Admin"])


# Listing moderation

@router.post(
    "/listings/{listing_id}/approve",
    response_model=ModerationResult,
    status_code=status.HTTP_200_OK,
    summary="Approve listing",
    description="Publish a pending listing and resolve its content flags",
    responses=get_crud_error_responses()
)
async def approve_listing(
    listing_id: UUID = Path(..., description="Listing ID"),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ModerationResult:
    return await moderation_service.approve_listing(listing_id, admin)


@router.post(
    "/listings/{listing_id}/reject",
    response_model=ModerationResult,
    status_code=status.HTTP_200_OK,
    summary="Reject listing",
    description="Reject a pending listing. A non-empty reason is required.",
    responses=get_crud_error_responses()
)
async def reject_listing(
    body: Optional[RejectListingRequest] = None,
    listing_id: UUID = Path(..., description="Listing ID"),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ModerationResult:
    reason = body.reason if body else None
    return await moderation_service.reject_listing(listing_id, reason, admin)


# User moderation

@router.post(
    "/users/{user_id}/approve",
    response_model=ModerationResult,
    summary="Approve or revoke user approval",
    responses=get_crud_error_responses()
)
async def approve_user(
    body: UserApprovalRequest,
    user_id: UUID = Path(..., description="User ID"),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ModerationResult:
    return await moderation_service.approve_user(user_id, body.is_approved, admin)


@router.post(
    "/users/{user_id}/reject",
    response_model=ModerationResult,
    summary="Reject user",
    description="Revoke approval and ban the account",
    responses=get_crud_error_responses()
)
async def reject_user(
    body: UserRejectRequest,
    user_id: UUID = Path(..., description="User ID"),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ModerationResult:
    return await moderation_service.reject_user(user_id, body.reason, admin)


@router.post(
    "/users/{user_id}/ban",
    response_model=ModerationResult,
    summary="Ban or unban user",
    description="Only a super admin may ban or unban a super admin",
    responses=get_crud_error_responses()
)
async def ban_user(
    body: UserBanRequest,
    user_id: UUID = Path(..., description="User ID"),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ModerationResult:
    return await moderation_service.ban_user(user_id, body.is_banned, body.reason, admin)


@router.post(
    "/users/{user_id}/verify",
    response_model=ModerationResult,
    summary="Verify or unverify user",
    description="Verified landlords publish listings without review",
    responses=get_crud_error_responses()
)
async def verify_user(
    body: UserVerifyRequest,
    user_id: UUID = Path(..., description="User ID"),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ModerationResult:
    return await moderation_service.verify_user(user_id, body.is_verified, admin)


@router.post(
    "/users/{user_id}/role",
    response_model=ModerationResult,
    summary="Change user role",
    description="Only a super admin may grant moderator or super_admin",
    responses=get_crud_error_responses()
)
async def change_user_role(
    body: UserRoleRequest,
    user_id: UUID = Path(..., description="User ID"),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ModerationResult:
    return await moderation_service.change_user_role(user_id, body.role, admin)


# Dashboard

@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Dashboard statistics",
    responses=get_auth_error_responses()
)
async def get_stats(
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> DashboardStats:
    return DashboardStats(**await moderation_service.get_stats())


@router.get(
    "/listings/pending",
    response_model=PendingListingsResponse,
    summary="Moderation queue",
    description="Pending listings, oldest first",
    responses=get_auth_error_responses()
)
async def get_pending_listings(
    limit: int = Query(50, ge=1, le=100),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> PendingListingsResponse:
    listings = await moderation_service.get_pending_listings(limit=limit)
    return PendingListingsResponse(
        listings=[ListingResponse.model_validate(listing.to_dict()) for listing in listings],
        count=len(listings),
    )


@router.get(
    "/flagged",
    response_model=List[FlaggedContentResponse],
    summary="Flagged content",
    description="Unreviewed content-filter hits with their listings",
    responses=get_auth_error_responses()
)
async def get_flagged_content(
    limit: int = Query(50, ge=1, le=100),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> List[FlaggedContentResponse]:
    flagged = await moderation_service.get_flagged_content(limit=limit)
    return [
        FlaggedContentResponse.model_validate({
            **flag.to_dict(),
            "listing": listing.to_dict() if listing else None,
        })
        for flag, listing in flagged
    ]


@router.get(
    "/users",
    response_model=AdminUserListResponse,
    summary="User management list",
    responses=get_auth_error_responses()
)
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> AdminUserListResponse:
    rows = await moderation_service.get_users(skip=skip, limit=limit)
    users = [
        AdminUserResponse.model_validate({**user.to_dict(), "listing_count": listing_count})
        for user, listing_count in rows
    ]
    return AdminUserListResponse(users=users, count=len(users))


@router.get(
    "/actions",
    response_model=List[AdminActionResponse],
    summary="Audit log",
    description="Most recent admin actions, newest first",
    responses=get_auth_error_responses()
)
async def get_recent_actions(
    admin: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> List[AdminActionResponse]:
    actions = await moderation_service.get_recent_actions()
    return [AdminActionResponse.model_validate(action.to_dict()) for action in actions]
