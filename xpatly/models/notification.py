"""
Notification model for in-app messages to users.
"""

from sqlalchemy import String, Text, Boolean, ForeignKey, Enum as SQLEnum, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from xpatly.database import Base
import enum
import uuid
from typing import Optional


class NotificationType(str, enum.Enum):
    NEW_MATCH = "new_match"
    LISTING_APPROVED = "listing_approved"
    LISTING_REJECTED = "listing_rejected"
    ADMIN_MESSAGE = "admin_message"


class Notification(Base):
    """
    Message shown in a user's dashboard.
    """

    __tablename__ = "notifications"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    type: Mapped[NotificationType] = mapped_column(
        SQLEnum(NotificationType, values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    message: Mapped[str] = mapped_column(Text, nullable=False)

    listing_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("listings.id", ondelete="SET NULL"),
        nullable=True
    )

    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_notification_user_read", "user_id", "read"),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "listing_id": str(self.listing_id) if self.listing_id else None,
            "read": self.read,
            "created_at": self.created_at.isoformat(),
        }
