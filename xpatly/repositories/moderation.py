"""
Repositories for the moderation tables: flagged content and the admin audit log.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update
from xpatly.repositories.base import BaseRepository
from xpatly.models.flagged_content import FlaggedContent, FlagAction
from xpatly.models.admin_action import AdminAction, AdminActionType, AdminTargetType
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)

BLOCKED_PHRASE_REASON = "Blocked phrase detected"


class FlaggedContentRepository(BaseRepository[FlaggedContent]):
    """
    Repository for content-filter hits awaiting review.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(FlaggedContent, db)

    async def flag_listing(
        self,
        listing_id: uuid.UUID,
        phrase: str,
        reason: str = BLOCKED_PHRASE_REASON,
        commit: bool = True
    ) -> FlaggedContent:
        """
        Record a blocked-phrase hit for a listing.

        Args:
            listing_id: Flagged listing
            phrase: The matching blocked phrase
            reason: Reason shown to moderators
            commit: Commit immediately, or only flush

        Returns:
            Created flag
        """
        flag = await self.create(
            {"listing_id": listing_id, "reason": reason, "flagged_text": phrase, "reviewed": False},
            commit=commit
        )
        logger.info(f"Flagged listing {listing_id}: '{phrase}'")
        return flag

    async def get_unreviewed(self, skip: int = 0, limit: int = 50) -> List[FlaggedContent]:
        """Unreviewed flags, newest first."""
        result = await self.db.execute(
            select(FlaggedContent)
            .where(FlaggedContent.reviewed.is_(False))
            .order_by(FlaggedContent.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_listing(self, listing_id: uuid.UUID) -> List[FlaggedContent]:
        result = await self.db.execute(
            select(FlaggedContent).where(FlaggedContent.listing_id == listing_id)
        )
        return list(result.scalars().all())

    async def count_unreviewed(self) -> int:
        return await self.count({"reviewed": False})

    async def resolve_for_listing(
        self,
        listing_id: uuid.UUID,
        reviewer_id: uuid.UUID,
        action: FlagAction,
        commit: bool = True
    ) -> int:
        """
        Mark every open flag of a listing as reviewed.

        Returns:
            Number of flags resolved
        """
        try:
            stmt = (
                update(FlaggedContent)
                .where(
                    FlaggedContent.listing_id == listing_id,
                    FlaggedContent.reviewed.is_(False),
                )
                .values(
                    reviewed=True,
                    reviewed_by=reviewer_id,
                    reviewed_at=datetime.now(timezone.utc),
                    action_taken=action,
                )
                .execution_options(synchronize_session="fetch")
            )
            result = await self.db.execute(stmt)
            await self._persist(commit)
            return result.rowcount
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to resolve flags for listing {listing_id}: {e}")
            raise


class AdminActionRepository(BaseRepository[AdminAction]):
    """
    Repository for the admin audit log.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(AdminAction, db)

    async def log_action(
        self,
        admin_id: uuid.UUID,
        action_type: AdminActionType,
        target_type: AdminTargetType,
        target_id: uuid.UUID,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        commit: bool = True
    ) -> AdminAction:
        """
        Append one audit row.

        Args:
            admin_id: Acting moderator or super admin
            action_type: What was done
            target_type: Listing or user
            target_id: ID of the affected row
            reason: Optional free-text reason
            details: Optional structured context
            commit: Commit immediately, or only flush

        Returns:
            Created audit row
        """
        action = await self.create(
            {
                "admin_id": admin_id,
                "action_type": action_type,
                "target_type": target_type,
                "target_id": target_id,
                "reason": reason,
                "details": details,
            },
            commit=commit
        )
        logger.info(
            f"Admin action {action_type.value} by {admin_id} on {target_type.value} {target_id}"
        )
        return action

    async def get_recent(self, limit: int = 50) -> List[AdminAction]:
        return await self.get_multi(skip=0, limit=limit, order_by="-created_at")

    async def get_for_target(self, target_id: uuid.UUID) -> List[AdminAction]:
        result = await self.db.execute(
            select(AdminAction)
            .where(AdminAction.target_id == target_id)
            .order_by(AdminAction.created_at.asc())
        )
        return list(result.scalars().all())

    async def count_for_target(self, target_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(AdminAction.id)).where(AdminAction.target_id == target_id)
        )
        return result.scalar() or 0
