"""
ListingImage model for photos attached to a listing.
"""

from sqlalchemy import String, Integer, ForeignKey, Index, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from xpatly.database import Base
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from xpatly.models.listing import Listing


class ListingImage(Base):
    """
    Stored image with its position in the listing gallery.
    """

    __tablename__ = "listing_images"

    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Public URL of the stored image"
    )

    file_path: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        unique=True,
        comment="Path relative to the upload directory"
    )

    order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Gallery position, 0-39"
    )

    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)

    file_size: Mapped[int] = mapped_column(Integer, nullable=False)

    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    listing: Mapped["Listing"] = relationship("Listing", back_populates="images")

    __table_args__ = (
        CheckConstraint('"order" >= 0 AND "order" <= 39', name="ck_listing_image_order"),
        Index("idx_listing_image_order", "listing_id", "order"),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "listing_id": str(self.listing_id),
            "url": self.url,
            "order": self.order,
            "mime_type": self.mime_type,
            "file_size": self.file_size,
            "width": self.width,
            "height": self.height,
        }
