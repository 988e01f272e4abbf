"""
Tests for models: the listing status machine, user permissions and serialization.
"""

import pytest
import uuid
from decimal import Decimal

from xpatly.models.listing import (
    Listing,
    ListingStatus,
    LISTING_STATUS_TRANSITIONS,
    submission_status,
)
from xpatly.models.user import User, UserRole, UserType
from xpatly.repositories.listing import ListingRepository
from xpatly.repositories.user import UserRepository
from tests.conftest import ListingFactory, ImageFactory, UserFactory


class TestListingStatusMachine:
    """Test the listing lifecycle transitions."""

    @pytest.mark.parametrize("source,target", [
        (ListingStatus.PENDING, ListingStatus.ACTIVE),
        (ListingStatus.PENDING, ListingStatus.REJECTED),
        (ListingStatus.ACTIVE, ListingStatus.ARCHIVED),
    ])
    def test_allowed_transitions(self, source, target):
        assert source.can_transition_to(target)

    def test_only_three_transitions_exist(self):
        allowed = {
            (source, target)
            for source, targets in LISTING_STATUS_TRANSITIONS.items()
            for target in targets
        }
        assert allowed == {
            (ListingStatus.PENDING, ListingStatus.ACTIVE),
            (ListingStatus.PENDING, ListingStatus.REJECTED),
            (ListingStatus.ACTIVE, ListingStatus.ARCHIVED),
        }

    @pytest.mark.parametrize("source,target", [
        (ListingStatus.ACTIVE, ListingStatus.REJECTED),
        (ListingStatus.ACTIVE, ListingStatus.PENDING),
        (ListingStatus.REJECTED, ListingStatus.ACTIVE),
        (ListingStatus.ARCHIVED, ListingStatus.ACTIVE),
        (ListingStatus.PENDING, ListingStatus.ARCHIVED),
        (ListingStatus.DRAFT, ListingStatus.ACTIVE),
        (ListingStatus.PENDING, ListingStatus.PENDING),
    ])
    def test_forbidden_transitions(self, source, target):
        assert not source.can_transition_to(target)

    def test_terminal_states(self):
        assert ListingStatus.REJECTED.is_terminal
        assert ListingStatus.ARCHIVED.is_terminal
        assert not ListingStatus.PENDING.is_terminal
        assert not ListingStatus.ACTIVE.is_terminal


class TestSubmissionStatus:
    """Test the initial status of a submitted listing."""

    def test_unverified_always_pending(self):
        assert submission_status(submitter_verified=False, flagged=False) == ListingStatus.PENDING
        assert submission_status(submitter_verified=False, flagged=True) == ListingStatus.PENDING

    def test_verified_clean_is_active(self):
        assert submission_status(submitter_verified=True, flagged=False) == ListingStatus.ACTIVE

    def test_verified_flagged_is_pending(self):
        assert submission_status(submitter_verified=True, flagged=True) == ListingStatus.PENDING


class TestUserModel:
    """Test User permissions."""

    def _user(self, role=UserRole.USER, user_type=UserType.TENANT, is_banned=False) -> User:
        return User(
            id=uuid.uuid4(),
            email="someone@example.com",
            hashed_password="x",
            role=role,
            user_type=user_type,
            is_banned=is_banned,
        )

    @pytest.mark.parametrize("role,expected", [
        (UserRole.USER, False),
        (UserRole.OWNER, False),
        (UserRole.MODERATOR, True),
        (UserRole.SUPER_ADMIN, True),
    ])
    def test_is_admin(self, role, expected):
        assert self._user(role=role).is_admin is expected

    def test_banned_moderator_is_not_admin(self):
        assert not self._user(role=UserRole.MODERATOR, is_banned=True).is_admin

    @pytest.mark.parametrize("role,user_type,expected", [
        (UserRole.USER, UserType.TENANT, False),
        (UserRole.USER, UserType.LANDLORD, True),
        (UserRole.USER, UserType.BOTH, True),
        (UserRole.OWNER, UserType.TENANT, True),
        (UserRole.MODERATOR, UserType.TENANT, True),
    ])
    def test_is_landlord(self, role, user_type, expected):
        assert self._user(role=role, user_type=user_type).is_landlord is expected

    def test_password_hashing(self):
        hashed = User.hash_password("Password123")
        user = User(email="a@example.com", hashed_password=hashed)
        assert hashed != "Password123"
        assert user.verify_password("Password123")
        assert not user.verify_password("password123")

    def test_invalid_email_rejected(self):
        with pytest.raises(ValueError):
            User.validate_email_format("not-an-email")


class TestListingModel:
    """Test Listing persistence and serialization."""

    @pytest.mark.asyncio
    async def test_to_dict_converts_decimals(self, listing_repository: ListingRepository, test_landlord: User):
        listing = await ListingFactory.create_listing(
            listing_repository, test_landlord.id, price=Decimal("999.50")
        )
        data = listing.to_dict()

        assert data["price"] == 999.5
        assert isinstance(data["latitude"], float)
        assert data["status"] == "active"
        assert data["owner_id"] == str(test_landlord.id)
        assert data["images"] == []

    @pytest.mark.asyncio
    async def test_images_ordered(
        self,
        listing_repository: ListingRepository,
        image_repository,
        active_listing: Listing
    ):
        await ImageFactory.create_image(image_repository, active_listing.id, order=2)
        await ImageFactory.create_image(image_repository, active_listing.id, order=0)
        await ImageFactory.create_image(image_repository, active_listing.id, order=1)

        listing = await listing_repository.get_with_images(active_listing.id)

        assert [image.order for image in listing.images] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_is_public_only_when_active(self, listing_repository: ListingRepository, test_landlord: User):
        for status in ListingStatus:
            listing = await ListingFactory.create_listing(
                listing_repository,
                test_landlord.id,
                address=f"Street {status.value}",
                status=status,
            )
            assert listing.is_public is (status == ListingStatus.ACTIVE)

    @pytest.mark.asyncio
    async def test_user_to_dict_excludes_password(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="dict@example.com")
        data = user.to_dict()
        assert "hashed_password" not in data
        assert data["role"] == "user"
        assert data["user_type"] == "tenant"
