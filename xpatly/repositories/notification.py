"""
Repositories for user notifications and saved searches.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from xpatly.repositories.base import BaseRepository
from xpatly.models.notification import Notification
from xpatly.models.saved_search import SavedSearch
from typing import Optional, List
import uuid
import logging

logger = logging.getLogger(__name__)


class NotificationRepository(BaseRepository[Notification]):
    """
    Repository for in-app notifications.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    async def get_for_user(
        self,
        user_id: uuid.UUID,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        """Notifications of a user, newest first."""
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.read.is_(False))
        query = query.order_by(Notification.created_at.desc()).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_owned(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Notification]:
        result = await self.db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()


class SavedSearchRepository(BaseRepository[SavedSearch]):
    """
    Repository for saved listing searches.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(SavedSearch, db)

    async def get_for_user(self, user_id: uuid.UUID) -> List[SavedSearch]:
        return await self.get_multi(filters={"user_id": user_id}, limit=100)

    async def get_owned(self, search_id: uuid.UUID, user_id: uuid.UUID) -> Optional[SavedSearch]:
        result = await self.db.execute(
            select(SavedSearch).where(
                SavedSearch.id == search_id,
                SavedSearch.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_all_except_user(self, user_id: uuid.UUID) -> List[SavedSearch]:
        """Every saved search not belonging to the given user."""
        result = await self.db.execute(
            select(SavedSearch).where(SavedSearch.user_id != user_id)
        )
        return list(result.scalars().all())
