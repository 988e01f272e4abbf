"""
Notification and saved search services.
Notifications are in-app rows; saved searches drive new-match notifications
whenever a listing becomes active.
"""

from typing import List, Optional, Tuple
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from xpatly.models.listing import Listing
from xpatly.models.notification import Notification, NotificationType
from xpatly.models.saved_search import SavedSearch
from xpatly.models.user import User
from xpatly.repositories.notification import NotificationRepository, SavedSearchRepository
from xpatly.schemas.listing import ListingSearchFilters
from xpatly.schemas.notification import SavedSearchCreate
from xpatly.utils.exceptions import APIException, NotFoundError, InternalServerError
import uuid
import logging

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for creating and reading user notifications.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.notification_repo = NotificationRepository(db_session)
        self.saved_search_repo = SavedSearchRepository(db_session)

    async def notify(
        self,
        user_id: uuid.UUID,
        notification_type: NotificationType,
        title: str,
        message: str,
        listing_id: Optional[uuid.UUID] = None,
        commit: bool = True
    ) -> Notification:
        """
        Create one notification.

        Args:
            user_id: Recipient
            notification_type: Kind of notification
            title: Short headline
            message: Body text
            listing_id: Related listing, if any
            commit: Commit immediately, or only flush

        Returns:
            Created notification
        """
        return await self.notification_repo.create(
            {
                "user_id": user_id,
                "type": notification_type,
                "title": title,
                "message": message,
                "listing_id": listing_id,
                "read": False,
            },
            commit=commit
        )

    async def notify_listing_approved(self, listing: Listing, commit: bool = True) -> Notification:
        return await self.notify(
            listing.owner_id,
            NotificationType.LISTING_APPROVED,
            "Listing approved",
            f"Your listing \"{listing.title}\" is now live.",
            listing_id=listing.id,
            commit=commit,
        )

    async def notify_listing_rejected(self, listing: Listing, reason: str, commit: bool = True) -> Notification:
        return await self.notify(
            listing.owner_id,
            NotificationType.LISTING_REJECTED,
            "Listing rejected",
            f"Your listing \"{listing.title}\" was rejected: {reason}",
            listing_id=listing.id,
            commit=commit,
        )

    async def notify_matches(self, listing: Listing, commit: bool = True) -> int:
        """
        Notify every user whose saved search matches a newly active listing.
        The listing owner is never notified about their own listing.

        Args:
            listing: Listing that just became active
            commit: Commit immediately, or only flush

        Returns:
            Number of notifications created
        """
        searches = await self.saved_search_repo.get_all_except_user(listing.owner_id)

        notified = set()
        for search in searches:
            if search.user_id in notified:
                continue
            try:
                filters = ListingSearchFilters(**(search.filters or {}))
            except PydanticValidationError:
                logger.warning(f"Skipping saved search {search.id} with unreadable filters")
                continue
            if not filters.matches(listing):
                continue

            await self.notify(
                search.user_id,
                NotificationType.NEW_MATCH,
                "New listing matches your search",
                f"\"{listing.title}\" in {listing.city} matches your saved search \"{search.name}\".",
                listing_id=listing.id,
                commit=False,
            )
            notified.add(search.user_id)

        if commit and notified:
            await self.db.commit()

        if notified:
            logger.info(f"Listing {listing.id} matched saved searches of {len(notified)} users")
        return len(notified)

    async def get_notifications(self, user: User, unread_only: bool = False) -> Tuple[List[Notification], int]:
        """
        Notifications of a user, newest first, with the unread count.
        """
        try:
            notifications = await self.notification_repo.get_for_user(user.id, unread_only=unread_only)
            unread_count = await self.notification_repo.count({"user_id": user.id, "read": False})
            return notifications, unread_count
        except Exception as e:
            logger.error(f"Failed to load notifications for user {user.id}: {e}")
            raise InternalServerError("Failed to load notifications")

    async def mark_read(self, notification_id: uuid.UUID, user: User) -> Notification:
        """
        Mark one of the user's notifications read.

        Raises:
            NotFoundError: If the notification doesn't exist or belongs to someone else
        """
        try:
            notification = await self.notification_repo.get_owned(notification_id, user.id)
            if not notification:
                raise NotFoundError("Notification", str(notification_id))

            if not notification.read:
                notification = await self.notification_repo.update(notification, {"read": True})
            return notification
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to mark notification {notification_id} read: {e}")
            raise InternalServerError("Failed to update notification")


class SavedSearchService:
    """
    Service for a user's saved listing searches.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.repository = SavedSearchRepository(db_session)

    async def create_saved_search(self, data: SavedSearchCreate, user: User) -> SavedSearch:
        try:
            saved = await self.repository.create({
                "user_id": user.id,
                "name": data.name,
                "filters": data.filters.model_dump(mode="json", exclude_none=True),
                "notify_email": data.notify_email,
            })
            logger.info(f"User {user.id} saved search '{saved.name}'")
            return saved
        except Exception as e:
            logger.error(f"Failed to save search for user {user.id}: {e}")
            raise InternalServerError("Failed to save search")

    async def get_saved_searches(self, user: User) -> List[SavedSearch]:
        return await self.repository.get_for_user(user.id)

    async def delete_saved_search(self, search_id: uuid.UUID, user: User) -> None:
        """
        Delete one of the user's saved searches.

        Raises:
            NotFoundError: If the search doesn't exist or belongs to someone else
        """
        try:
            saved = await self.repository.get_owned(search_id, user.id)
            if not saved:
                raise NotFoundError("Saved search", str(search_id))

            await self.repository.delete(saved.id)
            logger.info(f"User {user.id} deleted saved search {search_id}")
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete saved search {search_id}: {e}")
            raise InternalServerError("Failed to delete saved search")
