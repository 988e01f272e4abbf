"""
Listing image repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from xpatly.repositories.base import BaseRepository
from xpatly.models.listing_image import ListingImage
from typing import List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class ListingImageRepository(BaseRepository[ListingImage]):
    """
    Repository for listing gallery images.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(ListingImage, db)

    async def add_images(self, images_in: List[Dict[str, Any]], commit: bool = True) -> List[ListingImage]:
        """
        Insert several image rows at once.

        Args:
            images_in: Image field dictionaries, each with listing_id and order
            commit: Commit immediately, or only flush

        Returns:
            Created image instances
        """
        if not images_in:
            return []
        try:
            images = [ListingImage(**data) for data in images_in]
            self.db.add_all(images)
            await self._persist(commit)
            logger.debug(f"Stored {len(images)} listing images")
            return images
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to store listing images: {e}")
            raise
