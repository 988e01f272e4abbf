"""
AdminAction model: the moderation audit log.
Every admin mutation writes exactly one row here.
"""

from sqlalchemy import Text, JSON, ForeignKey, Enum as SQLEnum, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from xpatly.database import Base
import enum
import uuid
from typing import Any, Dict, Optional


class AdminActionType(str, enum.Enum):
    """Audit log action types."""
    APPROVE_LISTING = "approve_listing"
    REJECT_LISTING = "reject_listing"
    APPROVE_USER = "approve_user"
    REVOKE_APPROVAL = "revoke_approval"
    REJECT_USER = "reject_user"
    BAN_USER = "ban_user"
    UNBAN_USER = "unban_user"
    VERIFY_USER = "verify_user"
    UNVERIFY_USER = "unverify_user"
    CHANGE_USER_ROLE = "change_user_role"


class AdminTargetType(str, enum.Enum):
    LISTING = "listing"
    USER = "user"


class AdminAction(Base):
    """
    Audit row describing one moderation action.
    """

    __tablename__ = "admin_actions"

    admin_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    action_type: Mapped[AdminActionType] = mapped_column(
        SQLEnum(AdminActionType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True
    )

    target_type: Mapped[AdminTargetType] = mapped_column(
        SQLEnum(AdminTargetType, values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )

    target_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    details: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("idx_admin_action_target", "target_type", "target_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "admin_id": str(self.admin_id),
            "action_type": self.action_type.value,
            "target_type": self.target_type.value,
            "target_id": str(self.target_id),
            "reason": self.reason,
            "details": self.details,
            "created_at": self.created_at.isoformat(),
        }
