"""
FlaggedContent model for listings routed to manual review by the content filter.
"""

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, Enum as SQLEnum, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from xpatly.database import Base
from datetime import datetime
import enum
import uuid
from typing import Optional


class FlagAction(str, enum.Enum):
    """Outcome recorded when a moderator reviews a flag."""
    APPROVED = "approved"
    REJECTED = "rejected"


class FlaggedContent(Base):
    """
    A blocked-phrase hit recorded at listing submission time.
    """

    __tablename__ = "flagged_content"

    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    reason: Mapped[str] = mapped_column(String(255), nullable=False)

    flagged_text: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="The blocked phrase that matched"
    )

    reviewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    action_taken: Mapped[Optional[FlagAction]] = mapped_column(
        SQLEnum(FlagAction, values_callable=lambda e: [m.value for m in e]),
        nullable=True
    )

    __table_args__ = (
        Index("idx_flagged_reviewed_created", "reviewed", "created_at"),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "listing_id": str(self.listing_id),
            "reason": self.reason,
            "flagged_text": self.flagged_text,
            "reviewed": self.reviewed,
            "reviewed_by": str(self.reviewed_by) if self.reviewed_by else None,
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "action_taken": self.action_taken.value if self.action_taken else None,
            "created_at": self.created_at.isoformat(),
        }
