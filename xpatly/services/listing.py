"""
Listing service implementing submission, search, visibility and the
owner-side status transitions.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from pydantic import BaseModel
from xpatly.config import get_settings
from xpatly.repositories.listing import ListingRepository
from xpatly.repositories.moderation import FlaggedContentRepository, BLOCKED_PHRASE_REASON
from xpatly.models.listing import Listing, ListingStatus, submission_status
from xpatly.models.user import User
from xpatly.schemas.listing import (
    ListingSubmission,
    ListingSearchFilters,
    WIZARD_STEPS,
    next_wizard_step,
)
from xpatly.services.image import ListingImageService
from xpatly.services.notification import NotificationService
from xpatly.utils.content_filter import find_blocked_phrase
from xpatly.utils.validators import ValidationUtils, total_pages
from xpatly.utils.exceptions import (
    APIException,
    NotFoundError,
    ListingNotFoundError,
    ListingOwnershipError,
    ListingStatusError,
    InsufficientPermissionsError,
    DuplicateResourceError,
    InternalServerError,
)
from typing import Any, Dict, List, Optional, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)

settings = get_settings()

FLAGGED_MESSAGE = "Your listing has been submitted for review due to content policy."
PENDING_MESSAGE = "Your listing has been submitted and is awaiting approval."
PUBLISHED_MESSAGE = "Your listing has been published."


class SubmissionResult(BaseModel):
    """Outcome of a listing submission."""

    listing_id: uuid.UUID
    status: ListingStatus
    flagged: bool
    message: str


class ListingService:
    """
    Service for listing business logic.
    """

    def __init__(self, db_session: AsyncSession, image_service: Optional[ListingImageService] = None):
        self.db = db_session
        self.listing_repo = ListingRepository(db_session)
        self.flag_repo = FlaggedContentRepository(db_session)
        self.image_service = image_service or ListingImageService(db_session)
        self.notification_service = NotificationService(db_session)

    async def create_listing(
        self,
        submission: ListingSubmission,
        files: List[UploadFile],
        current_user: User
    ) -> SubmissionResult:
        """
        Submit a new listing.

        The text is re-checked against the blocked phrases. A hit does not
        reject the submission: the listing is stored as pending without
        images and a flag is queued for moderators.

        Args:
            submission: Validated listing fields
            files: Uploaded gallery images in display order
            current_user: Submitting user

        Returns:
            SubmissionResult with the new listing's status

        Raises:
            InsufficientPermissionsError: If the user is not a landlord
            DuplicateResourceError: If the user already has a live listing at this address
            FileUploadError: If an image is invalid
        """
        user_id = current_user.id
        uncommitted_files = None
        try:
            if not current_user.is_landlord:
                raise InsufficientPermissionsError("create listings")

            duplicate = await self.listing_repo.find_duplicate(current_user.id, submission.address)
            if duplicate:
                raise DuplicateResourceError("Listing", submission.address)

            listing_data = submission.model_dump()
            listing_data["owner_id"] = current_user.id

            hit = find_blocked_phrase([
                ("title", submission.title),
                ("description", submission.description),
            ])
            if hit:
                return await self._submit_flagged(listing_data, hit[0], hit[1], current_user)

            images = await self.image_service.validate_uploads(files)

            status = submission_status(current_user.is_verified, flagged=False)
            listing_data["status"] = status
            listing = await self.listing_repo.create_listing(listing_data, commit=False)
            listing_id = listing.id
            uncommitted_files = listing_id
            await self.image_service.store_images(listing_id, images, commit=False)
            await self.db.commit()
            uncommitted_files = None

            logger.info(
                f"Listing created: {listing_id} by {current_user.email} "
                f"(status: {status.value}, images: {len(images)})"
            )
            if status == ListingStatus.ACTIVE:
                await self._notify_matches_after_publish(listing)

            return SubmissionResult(
                listing_id=listing_id,
                status=status,
                flagged=False,
                message=PUBLISHED_MESSAGE if status == ListingStatus.ACTIVE else PENDING_MESSAGE,
            )
        except APIException:
            raise
        except Exception as e:
            await self.db.rollback()
            if uncommitted_files is not None:
                self.image_service.delete_listing_files(uncommitted_files)
            logger.error(f"Failed to create listing for user {user_id}: {e}")
            raise InternalServerError("Failed to create listing")

    async def _notify_matches_after_publish(self, listing: Listing) -> None:
        # Runs after commit; a failure is logged and the listing stays published
        listing_id = listing.id
        try:
            await self.notification_service.notify_matches(listing)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Saved-search matching failed for listing {listing_id}: {e}")

    async def _submit_flagged(
        self,
        listing_data: Dict[str, Any],
        field: str,
        phrase: str,
        current_user: User
    ) -> SubmissionResult:
        listing_data["status"] = ListingStatus.PENDING
        listing = await self.listing_repo.create_listing(listing_data, commit=False)
        await self.flag_repo.flag_listing(listing.id, phrase, reason=BLOCKED_PHRASE_REASON, commit=False)
        await self.db.commit()

        logger.warning(
            f"Listing {listing.id} by {current_user.email} flagged for review: "
            f"'{phrase}' in {field}"
        )
        return SubmissionResult(
            listing_id=listing.id,
            status=ListingStatus.PENDING,
            flagged=True,
            message=FLAGGED_MESSAGE,
        )

    def validate_wizard_step(self, step: str, payload: Dict[str, Any]) -> Tuple[BaseModel, Optional[str]]:
        """
        Validate the fields of one wizard step.

        Args:
            step: Step name
            payload: Raw step fields

        Returns:
            Tuple of (validated step model, next step name)

        Raises:
            NotFoundError: If the step doesn't exist
            pydantic.ValidationError: If the fields are invalid
        """
        schema = WIZARD_STEPS.get(step)
        if schema is None:
            raise NotFoundError("Wizard step", step)

        validated = schema.model_validate(payload)
        return validated, next_wizard_step(step)

    async def search_listings(
        self,
        filters: ListingSearchFilters,
        page: int = 1,
        per_page: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Search active listings with pagination.

        Returns:
            Dictionary with listings, total, page, per_page and total_pages
        """
        paging = ValidationUtils.validate_pagination(
            page, per_page or settings.default_page_size, settings.max_page_size
        )
        try:
            listings, total = await self.listing_repo.search_listings(
                filters, skip=paging["offset"], limit=paging["limit"]
            )
        except Exception as e:
            logger.error(f"Listing search failed: {e}")
            raise InternalServerError("Failed to search listings")

        return {
            "listings": listings,
            "total": total,
            "page": paging["page"],
            "per_page": paging["per_page"],
            "total_pages": total_pages(total, paging["per_page"]),
        }

    async def get_listing(self, listing_id: uuid.UUID, viewer: Optional[User] = None) -> Listing:
        """
        Get a listing as seen by the viewer.
        Non-active listings are only visible to their owner and to admins.

        Raises:
            ListingNotFoundError: If the listing doesn't exist or isn't visible
        """
        listing = await self.listing_repo.get_with_images(listing_id)
        if not listing:
            raise ListingNotFoundError(str(listing_id))

        if listing.is_public:
            return listing

        if viewer is not None and viewer.can_manage_listing(listing.owner_id):
            return listing

        raise ListingNotFoundError(str(listing_id))

    async def get_owner_listings(self, current_user: User) -> List[Listing]:
        return await self.listing_repo.get_by_owner(current_user.id)

    async def archive_listing(self, listing_id: uuid.UUID, current_user: User) -> Listing:
        """
        Archive an active listing on behalf of its owner.

        Raises:
            ListingNotFoundError: If the listing doesn't exist
            ListingOwnershipError: If the caller isn't the owner
            ListingStatusError: If the listing isn't active
        """
        try:
            listing = await self.listing_repo.get_with_images(listing_id)
            if not listing:
                raise ListingNotFoundError(str(listing_id))

            if listing.owner_id != current_user.id:
                raise ListingOwnershipError()

            self.ensure_transition(listing, ListingStatus.ARCHIVED)
            listing = await self.listing_repo.update(listing, {"status": ListingStatus.ARCHIVED})
            logger.info(f"Listing {listing.id} archived by owner {current_user.email}")
            return listing
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to archive listing {listing_id}: {e}")
            raise InternalServerError("Failed to archive listing")

    async def delete_listing(self, listing_id: uuid.UUID, current_user: User) -> None:
        """
        Delete a listing with its images and flags.

        Raises:
            ListingNotFoundError: If the listing doesn't exist
            ListingOwnershipError: If the caller isn't the owner
        """
        try:
            listing = await self.listing_repo.get_by_id(listing_id)
            if not listing:
                raise ListingNotFoundError(str(listing_id))

            if listing.owner_id != current_user.id:
                raise ListingOwnershipError()

            await self.listing_repo.delete_listing(listing)
            self.image_service.delete_listing_files(listing_id)
            logger.info(f"Listing {listing_id} deleted by owner {current_user.email}")
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete listing {listing_id}: {e}")
            raise InternalServerError("Failed to delete listing")

    @staticmethod
    def ensure_transition(listing: Listing, target: ListingStatus) -> None:
        """
        Raises:
            ListingStatusError: If the status machine forbids the move
        """
        if not listing.status.can_transition_to(target):
            raise ListingStatusError(listing.status.value, target.value)
