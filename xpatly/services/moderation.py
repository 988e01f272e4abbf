"""
Moderation service for the admin dashboard.

Every mutation applies its change, appends exactly one audit row and commits
both in a single transaction. A missing target is reported before anything
is written.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from xpatly.config import get_settings
from xpatly.models.admin_action import AdminAction, AdminActionType, AdminTargetType
from xpatly.models.flagged_content import FlagAction, FlaggedContent
from xpatly.models.listing import Listing, ListingStatus
from xpatly.models.user import User, UserRole, STAFF_ROLES
from xpatly.repositories.listing import ListingRepository
from xpatly.repositories.moderation import AdminActionRepository, FlaggedContentRepository
from xpatly.repositories.user import UserRepository
from xpatly.schemas.admin import ModerationResult
from xpatly.services.listing import ListingService
from xpatly.services.notification import NotificationService
from xpatly.utils.exceptions import (
    APIException,
    BadRequestError,
    ForbiddenError,
    InsufficientPermissionsError,
    InternalServerError,
    ListingNotFoundError,
    NotFoundError,
)
from typing import Any, Dict, List, Optional, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)

settings = get_settings()


class ModerationService:
    """
    Service for listing and user moderation by moderators and super admins.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.listing_repo = ListingRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.flag_repo = FlaggedContentRepository(db_session)
        self.action_repo = AdminActionRepository(db_session)
        self.notification_service = NotificationService(db_session)

    # Listing moderation

    async def approve_listing(self, listing_id: uuid.UUID, admin: User) -> ModerationResult:
        """
        Publish a pending listing.

        Args:
            listing_id: Listing to approve
            admin: Acting moderator

        Returns:
            ModerationResult with the audit row ID

        Raises:
            ListingNotFoundError: If the listing doesn't exist
            ListingStatusError: If the listing isn't pending
        """
        try:
            listing = await self._get_listing(listing_id)
            ListingService.ensure_transition(listing, ListingStatus.ACTIVE)

            await self.listing_repo.update(
                listing, {"status": ListingStatus.ACTIVE, "rejection_reason": None}, commit=False
            )
            action = await self.action_repo.log_action(
                admin.id,
                AdminActionType.APPROVE_LISTING,
                AdminTargetType.LISTING,
                listing.id,
                commit=False,
            )
            await self.flag_repo.resolve_for_listing(listing.id, admin.id, FlagAction.APPROVED, commit=False)
            await self.notification_service.notify_listing_approved(listing, commit=False)
            await self.notification_service.notify_matches(listing, commit=False)
            await self.db.commit()

            logger.info(f"Listing {listing.id} approved by {admin.email}")
            return ModerationResult(message="Listing approved", action_id=str(action.id))
        except APIException:
            raise
        except Exception as e:
            await self._fail("approve listing", listing_id, e)

    async def reject_listing(self, listing_id: uuid.UUID, reason: Optional[str], admin: User) -> ModerationResult:
        """
        Reject a pending listing with a reason shown to the owner.

        Raises:
            BadRequestError: If the reason is missing or blank
            ListingNotFoundError: If the listing doesn't exist
            ListingStatusError: If the listing isn't pending
        """
        reason = (reason or "").strip()
        if not reason:
            raise BadRequestError("Rejection reason is required")

        try:
            listing = await self._get_listing(listing_id)
            ListingService.ensure_transition(listing, ListingStatus.REJECTED)

            await self.listing_repo.update(
                listing, {"status": ListingStatus.REJECTED, "rejection_reason": reason}, commit=False
            )
            action = await self.action_repo.log_action(
                admin.id,
                AdminActionType.REJECT_LISTING,
                AdminTargetType.LISTING,
                listing.id,
                reason=reason,
                commit=False,
            )
            await self.flag_repo.resolve_for_listing(listing.id, admin.id, FlagAction.REJECTED, commit=False)
            await self.notification_service.notify_listing_rejected(listing, reason, commit=False)
            await self.db.commit()

            logger.info(f"Listing {listing.id} rejected by {admin.email}: {reason}")
            return ModerationResult(message="Listing rejected", action_id=str(action.id))
        except APIException:
            raise
        except Exception as e:
            await self._fail("reject listing", listing_id, e)

    # User moderation

    async def approve_user(self, user_id: uuid.UUID, is_approved: bool, admin: User) -> ModerationResult:
        action_type = AdminActionType.APPROVE_USER if is_approved else AdminActionType.REVOKE_APPROVAL
        message = "User approved" if is_approved else "User approval revoked"
        return await self._update_user(user_id, {"is_approved": is_approved}, action_type, admin, message)

    async def reject_user(self, user_id: uuid.UUID, reason: Optional[str], admin: User) -> ModerationResult:
        """Reject a user: revokes approval and bans the account."""
        return await self._update_user(
            user_id,
            {"is_approved": False, "is_banned": True},
            AdminActionType.REJECT_USER,
            admin,
            "User rejected",
            reason=reason,
            check=lambda target: self._check_can_ban(admin, target),
        )

    async def ban_user(
        self,
        user_id: uuid.UUID,
        is_banned: bool,
        reason: Optional[str],
        admin: User
    ) -> ModerationResult:
        """
        Ban or unban a user. Only a super admin may ban or unban a super admin.
        """
        action_type = AdminActionType.BAN_USER if is_banned else AdminActionType.UNBAN_USER
        return await self._update_user(
            user_id,
            {"is_banned": is_banned},
            action_type,
            admin,
            "User banned" if is_banned else "User unbanned",
            reason=reason,
            check=lambda target: self._check_can_ban(admin, target),
        )

    async def verify_user(self, user_id: uuid.UUID, is_verified: bool, admin: User) -> ModerationResult:
        action_type = AdminActionType.VERIFY_USER if is_verified else AdminActionType.UNVERIFY_USER
        message = "User verified" if is_verified else "User verification removed"
        return await self._update_user(user_id, {"is_verified": is_verified}, action_type, admin, message)

    async def change_user_role(self, user_id: uuid.UUID, role: str, admin: User) -> ModerationResult:
        """
        Change a user's role.

        Raises:
            BadRequestError: If the role is unknown
            ForbiddenError: If admins try to change their own role
            InsufficientPermissionsError: If a moderator grants or revokes an admin role
            NotFoundError: If the user doesn't exist
        """
        try:
            new_role = UserRole(role)
        except ValueError:
            valid = ", ".join(r.value for r in UserRole)
            raise BadRequestError(f"Invalid role '{role}'. Valid roles: {valid}")

        if user_id == admin.id:
            raise ForbiddenError("You cannot change your own role")

        def check(target: User) -> None:
            if admin.is_super_admin:
                return
            if new_role in STAFF_ROLES or target.role == UserRole.SUPER_ADMIN:
                raise InsufficientPermissionsError("assign administrative roles")

        return await self._update_user(
            user_id,
            {"role": new_role},
            AdminActionType.CHANGE_USER_ROLE,
            admin,
            f"User role changed to {new_role.value}",
            check=check,
            details_for=lambda target: {"old_role": target.role.value, "new_role": new_role.value},
        )

    async def _update_user(
        self,
        user_id: uuid.UUID,
        changes: Dict[str, Any],
        action_type: AdminActionType,
        admin: User,
        message: str,
        reason: Optional[str] = None,
        check=None,
        details_for=None,
    ) -> ModerationResult:
        try:
            target = await self.user_repo.get_by_id(user_id)
            if not target:
                raise NotFoundError("User", str(user_id))

            if check is not None:
                check(target)

            details = details_for(target) if details_for is not None else None
            await self.user_repo.update(target, changes, commit=False)
            action = await self.action_repo.log_action(
                admin.id,
                action_type,
                AdminTargetType.USER,
                target.id,
                reason=reason.strip() if reason else None,
                details=details,
                commit=False,
            )
            await self.db.commit()

            logger.info(f"{action_type.value} on user {target.email} by {admin.email}")
            return ModerationResult(message=message, action_id=str(action.id))
        except APIException:
            raise
        except Exception as e:
            await self._fail(action_type.value, user_id, e)

    @staticmethod
    def _check_can_ban(admin: User, target: User) -> None:
        if target.id == admin.id:
            raise ForbiddenError("You cannot ban your own account")
        if target.role == UserRole.SUPER_ADMIN and not admin.is_super_admin:
            raise InsufficientPermissionsError("ban a super admin")

    # Dashboard queries

    async def get_stats(self) -> Dict[str, Any]:
        """Counts shown on the admin dashboard."""
        by_status = await self.listing_repo.count_by_status()
        return {
            "total_listings": sum(by_status.values()),
            "pending_listings": by_status[ListingStatus.PENDING.value],
            "active_listings": by_status[ListingStatus.ACTIVE.value],
            "flagged_content": await self.flag_repo.count_unreviewed(),
            "total_users": await self.user_repo.count(),
            "listings_by_status": by_status,
        }

    async def get_pending_listings(self, limit: int = 50) -> List[Listing]:
        return await self.listing_repo.get_pending(limit=limit)

    async def get_flagged_content(self, limit: int = 50) -> List[Tuple[FlaggedContent, Optional[Listing]]]:
        """Unreviewed flags, each with its listing."""
        flags = await self.flag_repo.get_unreviewed(limit=limit)
        result = []
        for flag in flags:
            listing = await self.listing_repo.get_by_id(flag.listing_id)
            result.append((flag, listing))
        return result

    async def get_users(self, skip: int = 0, limit: int = 50) -> List[Tuple[User, int]]:
        return await self.user_repo.list_with_listing_counts(skip=skip, limit=limit)

    async def get_recent_actions(self, limit: Optional[int] = None) -> List[AdminAction]:
        return await self.action_repo.get_recent(limit or settings.admin_action_log_limit)

    async def _get_listing(self, listing_id: uuid.UUID) -> Listing:
        listing = await self.listing_repo.get_by_id(listing_id)
        if not listing:
            raise ListingNotFoundError(str(listing_id))
        return listing

    async def _fail(self, action: str, target_id: uuid.UUID, error: Exception) -> None:
        await self.db.rollback()
        logger.error(f"Failed to {action} for {target_id}: {error}")
        raise InternalServerError(f"Failed to {action.replace('_', ' ')}")
