"""
File upload utilities for listing image validation and storage.
Images are checked with Pillow and written to disk with aiofiles.
"""

import io
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from xpatly.config import get_settings
from xpatly.utils.exceptions import (
    FileUploadError,
    FileSizeExceededError,
    UnsupportedFileTypeError,
)

settings = get_settings()


@dataclass
class ValidatedImage:
    """Upload that passed validation, with its content already read."""
    filename: str
    content: bytes
    mime_type: str
    extension: str
    width: int
    height: int

    @property
    def file_size(self) -> int:
        return len(self.content)


class FileValidator:
    """Utility class for image upload validation."""

    # MIME type -> (Pillow format, stored extension)
    SUPPORTED_FORMATS = {
        "image/jpeg": ("JPEG", ".jpg"),
        "image/jpg": ("JPEG", ".jpg"),
        "image/png": ("PNG", ".png"),
        "image/webp": ("WEBP", ".webp"),
    }

    @classmethod
    def validate_mime_type(cls, mime_type: str) -> str:
        """
        Validate MIME type against the configured allow list.

        Raises:
            UnsupportedFileTypeError: If MIME type is not supported
        """
        mime_type = (mime_type or "").lower()
        if mime_type not in settings.allowed_image_types or mime_type not in cls.SUPPORTED_FORMATS:
            raise UnsupportedFileTypeError(mime_type or "unknown", settings.allowed_image_types)
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        """
        Validate file size.

        Raises:
            FileUploadError: If the file is empty
            FileSizeExceededError: If file size exceeds limit
        """
        if file_size <= 0:
            raise FileUploadError("File is empty")

        max_allowed = max_size or settings.max_image_size
        if file_size > max_allowed:
            raise FileSizeExceededError(file_size, max_allowed)
        return file_size

    @classmethod
    async def validate_upload_file(cls, file: UploadFile) -> ValidatedImage:
        """
        Comprehensive validation of an uploaded image.

        Args:
            file: FastAPI UploadFile object

        Returns:
            ValidatedImage holding the file content and dimensions

        Raises:
            FileUploadError: If the content is not a readable image
            UnsupportedFileTypeError: If the type is not allowed
            FileSizeExceededError: If the file is too large
        """
        mime_type = cls.validate_mime_type(file.content_type or "")

        await file.seek(0)
        content = await file.read()
        cls.validate_file_size(len(content))

        expected_format, extension = cls.SUPPORTED_FORMATS[mime_type]
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                width, height = img.size
                pil_format = img.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError(f"Invalid image file '{file.filename}': {str(e)}")

        if pil_format != expected_format:
            raise FileUploadError(
                f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'"
            )

        return ValidatedImage(
            filename=file.filename or f"image{extension}",
            content=content,
            mime_type=mime_type,
            extension=extension,
            width=width,
            height=height,
        )


class FileStorage:
    """Utility class for image storage on the local filesystem."""

    def __init__(self, base_dir: Optional[Path] = None, media_url: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.upload_dir)
        self.media_url = (media_url or settings.media_url).rstrip("/")

    def get_listing_directory(self, listing_id: uuid.UUID) -> Path:
        """Get or create the directory for a listing's images."""
        listing_dir = self.base_dir / "listings" / str(listing_id)
        listing_dir.mkdir(parents=True, exist_ok=True)
        return listing_dir

    def generate_file_path(self, listing_id: uuid.UUID, extension: str) -> Path:
        """Generate a unique path for a new listing image."""
        return self.get_listing_directory(listing_id) / f"{uuid.uuid4()}{extension}"

    def get_relative_path(self, full_path: Path) -> str:
        return full_path.relative_to(self.base_dir).as_posix()

    def build_url(self, relative_path: str) -> str:
        """Public URL under which StaticFiles serves the image."""
        return f"{self.media_url}/{relative_path}"

    async def save_bytes(self, content: bytes, file_path: Path) -> int:
        """
        Write image content to disk.

        Args:
            content: Raw file content
            file_path: Destination path

        Returns:
            Number of bytes written

        Raises:
            FileUploadError: If the write fails
        """
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
            return len(content)
        except OSError as e:
            self.delete_file(file_path)
            raise FileUploadError(f"Failed to save file: {str(e)}")

    def delete_file(self, file_path: Path) -> bool:
        """Delete a file from disk, returning whether it existed."""
        try:
            if file_path.exists():
                file_path.unlink()
                return True
            return False
        except OSError:
            return False

    def delete_listing_directory(self, listing_id: uuid.UUID) -> None:
        """Remove every stored image of a listing."""
        listing_dir = self.base_dir / "listings" / str(listing_id)
        if not listing_dir.exists():
            return
        for path in listing_dir.iterdir():
            self.delete_file(path)
        try:
            listing_dir.rmdir()
        except OSError:
            pass
