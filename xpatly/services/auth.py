"""
Authentication service for registration, login and token management.
Stands in for the hosted authentication provider with local JWT sessions.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from xpatly.config import settings
from xpatly.repositories.user import UserRepository
from xpatly.models.user import User
from xpatly.schemas.user import UserCreate
from xpatly.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
)
from xpatly.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    BannedUserError,
    ValidationError,
    DuplicateResourceError,
    InternalServerError,
)
from jose import JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for user accounts and JWT sessions.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register_user(self, user_data: UserCreate) -> User:
        """
        Register a new account.

        Args:
            user_data: Validated registration data

        Returns:
            Created user, unverified and unapproved

        Raises:
            DuplicateResourceError: If the email is already registered
            ValidationError: If the email is rejected by the validator
        """
        try:
            existing = await self.user_repo.get_by_email(user_data.email)
            if existing:
                raise DuplicateResourceError("User", user_data.email)

            user = await self.user_repo.create_user(user_data.model_dump())
            logger.info(f"User registered: {user.email} (ID: {user.id}, type: {user.user_type.value})")
            return user
        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to register user {user_data.email}: {e}")
            raise InternalServerError("Failed to register user")

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Authenticated User object

        Raises:
            InvalidCredentialsError: If credentials are invalid
            BannedUserError: If the account is banned
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")

        if not password:
            raise ValidationError("Password is required")

        user = await self.user_repo.authenticate_user(email, password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        if user.is_banned:
            logger.warning(f"Banned user attempted to log in: {email}")
            raise BannedUserError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def create_tokens(self, user: User) -> Tuple[str, str]:
        """
        Create access and refresh tokens for user.

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        refresh_token = create_refresh_token(user_id=user.id, email=user.email)
        return access_token, refresh_token

    async def login(self, email: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate user and create tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(email, password)
        access_token, refresh_token = await self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Create new access token from refresh token.

        Raises:
            InvalidTokenError: If refresh token is invalid
            TokenExpiredError: If refresh token is expired
            BannedUserError: If the account was banned since login
        """
        try:
            token_payload = verify_token(refresh_token, token_type="refresh")
        except JWTError as e:
            if "expired" in str(e).lower():
                raise TokenExpiredError()
            raise InvalidTokenError(str(e))

        user = await self._get_token_user(token_payload.user_id)
        if user.is_banned:
            raise BannedUserError()

        return create_access_token(user_id=user.id, email=user.email, role=user.role)

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from access token.

        Raises:
            InvalidTokenError: If token is invalid or the user no longer exists
            TokenExpiredError: If token is expired
        """
        try:
            token_payload = verify_token(token, token_type="access")
        except JWTError as e:
            if "expired" in str(e).lower():
                raise TokenExpiredError()
            raise InvalidTokenError(str(e))

        return await self._get_token_user(token_payload.user_id)

    async def _get_token_user(self, subject: str) -> User:
        try:
            user_id = uuid.UUID(subject)
        except ValueError:
            raise InvalidTokenError("Invalid token subject")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise InvalidTokenError("User no longer exists")
        return user

    @staticmethod
    def access_token_ttl_seconds() -> int:
        return settings.access_token_expire_minutes * 60
