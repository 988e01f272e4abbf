"""
Listing model for rental properties and the listing status lifecycle.
Public visibility of a listing is gated solely by its status being active.
"""

from sqlalchemy import (
    String, Text, Integer, Numeric, Boolean, Date, Enum as SQLEnum, Index, ForeignKey, Uuid
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from xpatly.database import Base
from decimal import Decimal
from datetime import date
import enum
import uuid
from typing import Dict, FrozenSet, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from xpatly.models.listing_image import ListingImage


class PropertyType(str, enum.Enum):
    """Kind of rental property."""
    APARTMENT = "apartment"
    HOUSE = "house"
    ROOM = "room"
    STUDIO = "studio"


class ListingStatus(str, enum.Enum):
    """
    Listing lifecycle states.

    pending -> active | rejected (moderation), active -> archived (owner).
    Draft exists in the schema but nothing moves listings into or out of it.
    """
    DRAFT = "draft"
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    ARCHIVED = "archived"

    @property
    def is_terminal(self) -> bool:
        return not LISTING_STATUS_TRANSITIONS[self]

    def can_transition_to(self, target: "ListingStatus") -> bool:
        return target in LISTING_STATUS_TRANSITIONS[self]


LISTING_STATUS_TRANSITIONS: Dict[ListingStatus, FrozenSet[ListingStatus]] = {
    ListingStatus.DRAFT: frozenset(),
    ListingStatus.PENDING: frozenset({ListingStatus.ACTIVE, ListingStatus.REJECTED}),
    ListingStatus.ACTIVE: frozenset({ListingStatus.ARCHIVED}),
    ListingStatus.REJECTED: frozenset(),
    ListingStatus.ARCHIVED: frozenset(),
}


def submission_status(submitter_verified: bool, flagged: bool) -> ListingStatus:
    """
    Status a freshly submitted listing starts in.

    Args:
        submitter_verified: Whether the submitting user is verified
        flagged: Whether the listing text matched a blocked phrase

    Returns:
        ACTIVE for verified submitters with clean text, PENDING otherwise
    """
    if submitter_verified and not flagged:
        return ListingStatus.ACTIVE
    return ListingStatus.PENDING


class Listing(Base):
    """
    Rental listing submitted by a landlord-type user.
    """

    __tablename__ = "listings"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who submitted this listing"
    )

    # Basic listing information
    title: Mapped[str] = mapped_column(String(100), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True
    )

    # Location
    address: Mapped[str] = mapped_column(String(255), nullable=False)

    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    district: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    latitude: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=7), nullable=False)

    longitude: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=7), nullable=False)

    # Pricing and specifications
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        index=True,
        comment="Monthly rent"
    )

    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False)

    area_sqm: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False)

    furnished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    expat_friendly: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    available_from: Mapped[date] = mapped_column(Date, nullable=False)

    youtube_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Moderation
    status: Mapped[ListingStatus] = mapped_column(
        SQLEnum(ListingStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ListingStatus.PENDING,
        index=True
    )

    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    images: Mapped[List["ListingImage"]] = relationship(
        "ListingImage",
        back_populates="listing",
        cascade="all, delete-orphan",
        order_by="ListingImage.order",
        lazy="selectin"
    )

    __table_args__ = (
        Index("idx_listing_status_created", "status", "created_at"),
        Index("idx_listing_search", "status", "city", "property_type", "price"),
        Index("idx_listing_owner_status", "owner_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Listing(id={self.id}, title={self.title}, status={self.status})>"

    @property
    def is_public(self) -> bool:
        return self.status == ListingStatus.ACTIVE

    def to_dict(self, include_images: bool = True) -> dict:
        """
        Convert listing to dictionary.

        Args:
            include_images: Whether to include image data

        Returns:
            Dictionary representation of listing
        """
        data = {
            "id": str(self.id),
            "owner_id": str(self.owner_id),
            "title": self.title,
            "description": self.description,
            "property_type": self.property_type.value,
            "address": self.address,
            "city": self.city,
            "district": self.district,
            "latitude": float(self.latitude),
            "longitude": float(self.longitude),
            "price": float(self.price),
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area_sqm": float(self.area_sqm),
            "furnished": self.furnished,
            "expat_friendly": self.expat_friendly,
            "available_from": self.available_from.isoformat(),
            "youtube_url": self.youtube_url,
            "status": self.status.value,
            "rejection_reason": self.rejection_reason,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_images:
            data["images"] = [image.to_dict() for image in self.images]

        return data
