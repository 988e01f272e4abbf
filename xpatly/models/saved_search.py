"""
SavedSearch model: a named set of search filters a user wants to be notified about.
"""

from sqlalchemy import String, Boolean, JSON, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from xpatly.database import Base
import uuid
from typing import Any, Dict


class SavedSearch(Base):
    """
    Stored listing search filters.
    """

    __tablename__ = "saved_searches"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    filters: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Same keys as the listing search query"
    )

    notify_email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "name": self.name,
            "filters": self.filters,
            "notify_email": self.notify_email,
            "created_at": self.created_at.isoformat(),
        }
