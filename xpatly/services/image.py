"""
Image service for listing gallery uploads.
Validates every upload before anything is written, then stores files on disk
and records one image row per file in upload order.
"""

from pathlib import Path
from typing import List, Optional
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from xpatly.config import get_settings
from xpatly.models.listing_image import ListingImage
from xpatly.repositories.listing_image import ListingImageRepository
from xpatly.utils.file_utils import FileStorage, FileValidator, ValidatedImage
from xpatly.utils.exceptions import ResourceLimitExceededError
import uuid
import logging

logger = logging.getLogger(__name__)

settings = get_settings()


class ListingImageService:
    """Service for managing listing image uploads and storage."""

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db_session = db_session
        self.repository = ListingImageRepository(db_session)
        self.storage = storage or FileStorage()
        self.max_images = settings.max_images_per_listing

    async def validate_uploads(self, files: List[UploadFile]) -> List[ValidatedImage]:
        """
        Validate a batch of uploads.

        Args:
            files: Uploaded files in gallery order

        Returns:
            Validated images with content read into memory

        Raises:
            ResourceLimitExceededError: If more files than allowed are sent
            FileUploadError: If any file is not a usable image
        """
        if len(files) > self.max_images:
            raise ResourceLimitExceededError("Images", self.max_images)

        validated = []
        for file in files:
            validated.append(await FileValidator.validate_upload_file(file))
        return validated

    async def store_images(
        self,
        listing_id: uuid.UUID,
        images: List[ValidatedImage],
        commit: bool = True
    ) -> List[ListingImage]:
        """
        Write validated images to disk and create their rows.

        Args:
            listing_id: Listing the gallery belongs to
            images: Output of validate_uploads
            commit: Commit immediately, or only flush

        Returns:
            Created image rows, ordered from 0
        """
        if not images:
            return []

        written: List[Path] = []
        rows = []
        try:
            for order, image in enumerate(images):
                file_path = self.storage.generate_file_path(listing_id, image.extension)
                file_size = await self.storage.save_bytes(image.content, file_path)
                written.append(file_path)

                relative_path = self.storage.get_relative_path(file_path)
                rows.append({
                    "listing_id": listing_id,
                    "url": self.storage.build_url(relative_path),
                    "file_path": relative_path,
                    "order": order,
                    "mime_type": image.mime_type,
                    "file_size": file_size,
                    "width": image.width,
                    "height": image.height,
                })

            stored = await self.repository.add_images(rows, commit=commit)
            logger.info(f"Stored {len(stored)} images for listing {listing_id}")
            return stored
        except Exception:
            for path in written:
                self.storage.delete_file(path)
            raise

    def delete_listing_files(self, listing_id: uuid.UUID) -> None:
        """Remove the stored files of a listing's gallery."""
        self.storage.delete_listing_directory(listing_id)
        logger.debug(f"Removed image directory of listing {listing_id}")
