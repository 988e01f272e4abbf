"""
Test configuration and fixtures for the Xpatly API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os
import tempfile

# Settings are read at import time, so the environment must be prepared first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="xpatly-test-uploads-")

import io
import uuid
import pytest
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator, Dict, Optional
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from xpatly.main import app
from xpatly.database import Base, get_db
from xpatly.models.user import User, UserRole, UserType
from xpatly.models.listing import Listing, ListingStatus, PropertyType
from xpatly.models.listing_image import ListingImage
from xpatly.repositories.user import UserRepository
from xpatly.repositories.listing import ListingRepository
from xpatly.repositories.listing_image import ListingImageRepository
from xpatly.services.auth import AuthService
from xpatly.services.listing import ListingService
from xpatly.services.moderation import ModerationService
from xpatly.services.notification import NotificationService, SavedSearchService
from xpatly.utils.auth import create_access_token

TEST_PASSWORD = "Password123"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def listing_repository(db_session: AsyncSession) -> ListingRepository:
    return ListingRepository(db_session)


@pytest.fixture
def image_repository(db_session: AsyncSession) -> ListingImageRepository:
    return ListingImageRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def listing_service(db_session: AsyncSession) -> ListingService:
    return ListingService(db_session)


@pytest.fixture
def moderation_service(db_session: AsyncSession) -> ModerationService:
    return ModerationService(db_session)


@pytest.fixture
def notification_service(db_session: AsyncSession) -> NotificationService:
    return NotificationService(db_session)


@pytest.fixture
def saved_search_service(db_session: AsyncSession) -> SavedSearchService:
    return SavedSearchService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        full_name: str = "Test User",
        role: UserRole = UserRole.USER,
        user_type: UserType = UserType.TENANT,
        is_verified: bool = False,
        is_approved: bool = False,
        is_banned: bool = False
    ) -> dict:
        """Create user data dictionary."""
        return {
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "full_name": full_name,
            "role": role,
            "user_type": user_type,
            "is_verified": is_verified,
            "is_approved": is_approved,
            "is_banned": is_banned,
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **kwargs) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(UserFactory.create_user_data(**kwargs))


class ListingFactory:
    """Factory for creating test listings."""

    @staticmethod
    def create_listing_data(
        owner_id: Optional[uuid.UUID] = None,
        title: str = "Bright two-room flat in Kalamaja",
        description: str = (
            "Renovated two-room apartment close to the old town, with a balcony, "
            "new kitchen and fast internet. Pets are welcome."
        ),
        property_type: PropertyType = PropertyType.APARTMENT,
        address: str = "Kotzebue 12",
        city: str = "Tallinn",
        district: Optional[str] = "Kalamaja",
        price: Decimal = Decimal("850.00"),
        bedrooms: int = 2,
        bathrooms: int = 1,
        area_sqm: Decimal = Decimal("54.00"),
        furnished: bool = True,
        expat_friendly: bool = True,
        status: ListingStatus = ListingStatus.ACTIVE,
        **overrides
    ) -> dict:
        """Create listing data dictionary."""
        data = {
            "owner_id": owner_id,
            "title": title,
            "description": description,
            "property_type": property_type,
            "address": address,
            "city": city,
            "district": district,
            "latitude": Decimal("59.4436000"),
            "longitude": Decimal("24.7375000"),
            "price": price,
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "area_sqm": area_sqm,
            "furnished": furnished,
            "expat_friendly": expat_friendly,
            "available_from": date(2026, 1, 1),
            "status": status,
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_listing(listing_repo: ListingRepository, owner_id: uuid.UUID, **kwargs) -> Listing:
        """Create a test listing in the database."""
        return await listing_repo.create_listing(ListingFactory.create_listing_data(owner_id=owner_id, **kwargs))

    @staticmethod
    def form_data(**overrides) -> Dict[str, str]:
        """Multipart form fields for the listing submission endpoint."""
        data = {
            "property_type": "apartment",
            "address": "Kotzebue 12",
            "city": "Tallinn",
            "district": "Kalamaja",
            "latitude": "59.4436",
            "longitude": "24.7375",
            "title": "Bright two-room flat in Kalamaja",
            "description": (
                "Renovated two-room apartment close to the old town, with a balcony, "
                "new kitchen and fast internet. Pets are welcome."
            ),
            "price": "850",
            "bedrooms": "2",
            "bathrooms": "1",
            "area_sqm": "54",
            "furnished": "true",
            "expat_friendly": "true",
            "available_from": "2026-01-01",
        }
        data.update(overrides)
        return data


class ImageFactory:
    """Factory for creating test listing images."""

    @staticmethod
    def image_bytes(image_format: str = "JPEG", size=(64, 48), color=(200, 120, 40)) -> bytes:
        """Generate a real image in memory."""
        buffer = io.BytesIO()
        Image.new("RGB", size, color).save(buffer, format=image_format)
        return buffer.getvalue()

    @staticmethod
    async def create_image(
        image_repo: ListingImageRepository,
        listing_id: uuid.UUID,
        order: int = 0,
        mime_type: str = "image/jpeg"
    ) -> ListingImage:
        """Create a test listing image row."""
        relative_path = f"listings/{listing_id}/{uuid.uuid4().hex}.jpg"
        images = await image_repo.add_images([{
            "listing_id": listing_id,
            "url": f"/media/{relative_path}",
            "file_path": relative_path,
            "order": order,
            "mime_type": mime_type,
            "file_size": 2048,
            "width": 64,
            "height": 48,
        }])
        return images[0]


def auth_headers(user: User) -> Dict[str, str]:
    """Authorization header with a fresh access token for the user."""
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


# Common test fixtures
@pytest.fixture
async def test_tenant(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="tenant@test.com", full_name="Test Tenant")


@pytest.fixture
async def test_landlord(user_repository: UserRepository) -> User:
    """Unverified landlord: submissions wait for review."""
    return await UserFactory.create_user(
        user_repository,
        email="landlord@test.com",
        full_name="Test Landlord",
        user_type=UserType.LANDLORD
    )


@pytest.fixture
async def test_verified_landlord(user_repository: UserRepository) -> User:
    """Verified landlord: clean submissions publish directly."""
    return await UserFactory.create_user(
        user_repository,
        email="verified@test.com",
        full_name="Verified Landlord",
        user_type=UserType.LANDLORD,
        is_verified=True,
        is_approved=True
    )


@pytest.fixture
async def test_moderator(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="moderator@test.com",
        full_name="Test Moderator",
        role=UserRole.MODERATOR
    )


@pytest.fixture
async def test_super_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="superadmin@test.com",
        full_name="Test Super Admin",
        role=UserRole.SUPER_ADMIN
    )


@pytest.fixture
async def active_listing(listing_repository: ListingRepository, test_landlord: User) -> Listing:
    return await ListingFactory.create_listing(listing_repository, test_landlord.id)


@pytest.fixture
async def pending_listing(listing_repository: ListingRepository, test_landlord: User) -> Listing:
    return await ListingFactory.create_listing(
        listing_repository,
        test_landlord.id,
        title="Cosy studio near Ülemiste",
        address="Peterburi tee 2",
        status=ListingStatus.PENDING
    )
