"""
User repository for authentication and account moderation queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from xpatly.repositories.base import BaseRepository
from xpatly.models.user import User, UserRole, UserType
from xpatly.models.listing import Listing
from typing import Optional, List, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: email, password
                      Optional: full_name, phone, user_type, role and moderation flags

        Returns:
            Created user instance

        Raises:
            ValueError: If the email is invalid or already registered
        """
        try:
            email = User.validate_email_format(user_data["email"])

            if await self.get_by_email(email):
                raise ValueError(f"User with email {email} already exists")

            data = dict(user_data)
            password = data.pop("password")

            create_data = {
                **data,
                "email": email,
                "hashed_password": User.hash_password(password),
                "role": data.get("role", UserRole.USER),
                "user_type": data.get("user_type", UserType.TENANT),
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.warning(f"User validation failed: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        normalized_email = email.lower().strip()
        result = await self.db.execute(select(User).where(User.email == normalized_email))
        return result.scalar_one_or_none()

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Check an email and password pair.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            User instance if the password matches, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return user

    async def list_with_listing_counts(
        self,
        skip: int = 0,
        limit: int = 50
    ) -> List[Tuple[User, int]]:
        """
        Users for the admin dashboard, newest first, with their listing counts.

        Returns:
            List of (user, listing_count) tuples
        """
        try:
            listing_count = (
                select(func.count(Listing.id))
                .where(Listing.owner_id == User.id)
                .correlate(User)
                .scalar_subquery()
            )
            query = (
                select(User, listing_count)
                .order_by(User.created_at.desc())
                .offset(skip)
                .limit(limit)
            )
            result = await self.db.execute(query)
            return [(row[0], row[1] or 0) for row in result.all()]
        except Exception as e:
            logger.error(f"Failed to list users with listing counts: {e}")
            raise
