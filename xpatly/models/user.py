"""
User model with authentication, marketplace role and moderation flags.
Handles tenants, landlords, listing owners and the moderation staff.
"""

from sqlalchemy import String, Boolean, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from xpatly.database import Base
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
import enum
import uuid
from typing import Optional

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    USER = "user"
    OWNER = "owner"
    MODERATOR = "moderator"
    SUPER_ADMIN = "super_admin"


class UserType(str, enum.Enum):
    """Which side of the marketplace the user is on."""
    TENANT = "tenant"
    LANDLORD = "landlord"
    BOTH = "both"


STAFF_ROLES = (UserRole.MODERATOR, UserRole.SUPER_ADMIN)


class User(Base):
    """
    User model for authentication and authorization.
    Carries the moderation flags (verified, approved, banned) set by admins.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="User's full name"
    )

    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    preferred_language: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        default="en"
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.USER,
        index=True,
        comment="User role for access control"
    )

    user_type: Mapped[UserType] = mapped_column(
        SQLEnum(UserType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserType.TENANT,
        comment="Tenant, landlord or both"
    )

    # Moderation flags
    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Verified users publish listings without review"
    )

    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_banned: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    @property
    def is_admin(self) -> bool:
        """Moderators and super admins that are not banned."""
        return self.role in STAFF_ROLES and not self.is_banned

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN and not self.is_banned

    @property
    def is_landlord(self) -> bool:
        """Check if the user may submit listings."""
        if self.role in (UserRole.OWNER, *STAFF_ROLES):
            return True
        return self.user_type in (UserType.LANDLORD, UserType.BOTH)

    def can_manage_listing(self, listing_owner_id: uuid.UUID) -> bool:
        """
        Check if user can manage a specific listing.

        Args:
            listing_owner_id: UUID of the listing's owner

        Returns:
            True if user owns the listing or is an admin
        """
        if self.is_admin:
            return True
        return self.id == listing_owner_id

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).

        Returns:
            Dictionary representation of user
        """
        return {
            "id": str(self.id),
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "preferred_language": self.preferred_language,
            "role": self.role.value,
            "user_type": self.user_type.value,
            "is_verified": self.is_verified,
            "is_approved": self.is_approved,
            "is_banned": self.is_banned,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
