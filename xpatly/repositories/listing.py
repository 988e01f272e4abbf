"""
Listing repository with public search and moderation queue queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func, delete
from sqlalchemy.orm import selectinload
from xpatly.repositories.base import BaseRepository
from xpatly.models.listing import Listing, ListingStatus
from xpatly.models.flagged_content import FlaggedContent
from xpatly.schemas.listing import ListingSearchFilters
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class ListingRepository(BaseRepository[Listing]):
    """
    Repository for listings.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Listing, db)

    async def get_with_images(self, listing_id: uuid.UUID) -> Optional[Listing]:
        """
        Get a listing with a freshly loaded image gallery.

        Args:
            listing_id: UUID of the listing

        Returns:
            Listing or None if not found
        """
        query = (
            select(Listing)
            .options(selectinload(Listing.images))
            .where(Listing.id == listing_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def search_listings(
        self,
        filters: ListingSearchFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Listing], int]:
        """
        Search active listings, newest first.

        Args:
            filters: Search filters
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return

        Returns:
            Tuple of (listings, total count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            count_query = select(func.count(Listing.id)).where(and_(*conditions))
            total_count = (await self.db.execute(count_query)).scalar() or 0

            query = (
                select(Listing)
                .options(selectinload(Listing.images))
                .where(and_(*conditions))
                .order_by(Listing.created_at.desc())
                .offset(skip)
                .limit(limit)
            )
            result = await self.db.execute(query)
            listings = list(result.scalars().all())

            logger.debug(f"Listing search returned {len(listings)} of {total_count} total results")
            return listings, total_count
        except Exception as e:
            logger.error(f"Failed to search listings: {e}")
            raise

    def _build_filter_conditions(self, filters: ListingSearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.
        The active-status condition is always present.
        """
        conditions = [Listing.status == ListingStatus.ACTIVE]

        if filters.city:
            conditions.append(Listing.city.ilike(f"%{filters.city}%"))
        if filters.district:
            conditions.append(Listing.district.ilike(f"%{filters.district}%"))
        if filters.property_type:
            conditions.append(Listing.property_type == filters.property_type)
        if filters.price_min is not None:
            conditions.append(Listing.price >= filters.price_min)
        if filters.price_max is not None:
            conditions.append(Listing.price <= filters.price_max)
        if filters.bedrooms is not None:
            conditions.append(Listing.bedrooms >= filters.bedrooms)
        if filters.bathrooms is not None:
            conditions.append(Listing.bathrooms >= filters.bathrooms)
        if filters.area_min is not None:
            conditions.append(Listing.area_sqm >= filters.area_min)
        if filters.area_max is not None:
            conditions.append(Listing.area_sqm <= filters.area_max)
        if filters.furnished is not None:
            conditions.append(Listing.furnished == filters.furnished)
        if filters.expat_friendly is not None:
            conditions.append(Listing.expat_friendly == filters.expat_friendly)

        return conditions

    async def get_by_owner(self, owner_id: uuid.UUID) -> List[Listing]:
        """All listings of one owner in every status, newest first."""
        query = (
            select(Listing)
            .options(selectinload(Listing.images))
            .where(Listing.owner_id == owner_id)
            .order_by(Listing.created_at.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_pending(self, skip: int = 0, limit: int = 50) -> List[Listing]:
        """Moderation queue, oldest first."""
        query = (
            select(Listing)
            .options(selectinload(Listing.images))
            .where(Listing.status == ListingStatus.PENDING)
            .order_by(Listing.created_at.asc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_by_status(self) -> Dict[str, int]:
        """Number of listings per status, with zero for unused statuses."""
        result = await self.db.execute(
            select(Listing.status, func.count(Listing.id)).group_by(Listing.status)
        )
        counts: Dict[str, int] = {status.value: 0 for status in ListingStatus}
        for status, count in result.all():
            counts[status.value] = count
        return counts

    async def find_duplicate(self, owner_id: uuid.UUID, address: str) -> Optional[Listing]:
        """Live listing by the same owner at the same address, if any."""
        query = select(Listing).where(
            Listing.owner_id == owner_id,
            func.lower(Listing.address) == address.lower(),
            Listing.status.in_([ListingStatus.PENDING, ListingStatus.ACTIVE]),
        ).limit(1)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def delete_listing(self, listing: Listing) -> None:
        """
        Delete a listing together with its images and flags.

        Args:
            listing: Persistent listing instance
        """
        try:
            await self.db.execute(delete(FlaggedContent).where(FlaggedContent.listing_id == listing.id))
            await self.db.delete(listing)
            await self.db.commit()
            logger.info(f"Deleted listing {listing.id}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete listing {listing.id}: {e}")
            raise

    async def create_listing(self, listing_data: Dict[str, Any], commit: bool = True) -> Listing:
        """Create a listing row."""
        listing = await self.create(listing_data, commit=commit)
        logger.debug(f"Created listing row {listing.id} with status {listing.status.value}")
        return listing
