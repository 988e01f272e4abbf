"""
Tests for repository classes.
Covers CRUD operations, listing search and the moderation tables.
"""

import pytest
import uuid
from decimal import Decimal

from xpatly.models.admin_action import AdminActionType, AdminTargetType
from xpatly.models.flagged_content import FlagAction
from xpatly.models.listing import Listing, ListingStatus, PropertyType
from xpatly.models.user import User
from xpatly.repositories.listing import ListingRepository
from xpatly.repositories.moderation import AdminActionRepository, FlaggedContentRepository, BLOCKED_PHRASE_REASON
from xpatly.repositories.user import UserRepository
from xpatly.schemas.listing import ListingSearchFilters
from tests.conftest import ListingFactory, UserFactory, TEST_PASSWORD


class TestUserRepository:
    """Test UserRepository functionality."""

    @pytest.mark.asyncio
    async def test_create_user_hashes_password(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="Anna@Example.com")

        assert user.email == "anna@example.com"
        assert user.hashed_password != TEST_PASSWORD
        assert user.is_verified is False
        assert user.is_banned is False

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, user_repository: UserRepository, test_tenant: User):
        with pytest.raises(ValueError, match="already exists"):
            await UserFactory.create_user(user_repository, email=test_tenant.email)

    @pytest.mark.asyncio
    async def test_authenticate_user(self, user_repository: UserRepository, test_tenant: User):
        assert (await user_repository.authenticate_user(test_tenant.email, TEST_PASSWORD)).id == test_tenant.id
        assert await user_repository.authenticate_user(test_tenant.email, "Wrong123") is None
        assert await user_repository.authenticate_user("nobody@example.com", TEST_PASSWORD) is None

    @pytest.mark.asyncio
    async def test_list_with_listing_counts(
        self,
        user_repository: UserRepository,
        listing_repository: ListingRepository,
        test_landlord: User,
        test_tenant: User
    ):
        await ListingFactory.create_listing(listing_repository, test_landlord.id, address="Street 1")
        await ListingFactory.create_listing(listing_repository, test_landlord.id, address="Street 2")

        counts = {user.id: count for user, count in await user_repository.list_with_listing_counts()}

        assert counts[test_landlord.id] == 2
        assert counts[test_tenant.id] == 0


class TestListingRepository:
    """Test ListingRepository search and queue queries."""

    @pytest.fixture
    async def search_data(self, listing_repository: ListingRepository, test_landlord: User):
        owner = test_landlord.id
        return {
            "tallinn_flat": await ListingFactory.create_listing(
                listing_repository, owner, address="A 1", city="Tallinn", district="Kalamaja",
                price=Decimal("800"), bedrooms=2, bathrooms=1, area_sqm=Decimal("50"),
            ),
            "tallinn_house": await ListingFactory.create_listing(
                listing_repository, owner, address="A 2", city="Tallinn", district="Nõmme",
                property_type=PropertyType.HOUSE, price=Decimal("1800"), bedrooms=4, bathrooms=2,
                area_sqm=Decimal("160"), furnished=False,
            ),
            "tartu_room": await ListingFactory.create_listing(
                listing_repository, owner, address="A 3", city="Tartu", district=None,
                property_type=PropertyType.ROOM, price=Decimal("350"), bedrooms=1,
                area_sqm=Decimal("14"), expat_friendly=False,
            ),
            "pending": await ListingFactory.create_listing(
                listing_repository, owner, address="A 4", city="Tallinn", status=ListingStatus.PENDING,
            ),
            "archived": await ListingFactory.create_listing(
                listing_repository, owner, address="A 5", city="Tallinn", status=ListingStatus.ARCHIVED,
            ),
        }

    @pytest.mark.asyncio
    async def test_search_returns_only_active(self, listing_repository: ListingRepository, search_data):
        listings, total = await listing_repository.search_listings(ListingSearchFilters())

        assert total == 3
        assert {l.id for l in listings} == {
            search_data["tallinn_flat"].id,
            search_data["tallinn_house"].id,
            search_data["tartu_room"].id,
        }

    @pytest.mark.asyncio
    async def test_search_newest_first(self, listing_repository: ListingRepository, search_data):
        listings, _ = await listing_repository.search_listings(ListingSearchFilters())
        assert listings[0].id == search_data["tartu_room"].id
        assert listings[-1].id == search_data["tallinn_flat"].id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("filters,expected", [
        ({"city": "tall"}, {"tallinn_flat", "tallinn_house"}),
        ({"district": "kalamaja"}, {"tallinn_flat"}),
        ({"property_type": PropertyType.ROOM}, {"tartu_room"}),
        ({"price_min": 500, "price_max": 1000}, {"tallinn_flat"}),
        ({"bedrooms": 2}, {"tallinn_flat", "tallinn_house"}),
        ({"bathrooms": 2}, {"tallinn_house"}),
        ({"area_min": 20, "area_max": 100}, {"tallinn_flat"}),
        ({"furnished": False}, {"tallinn_house"}),
        ({"expat_friendly": False}, {"tartu_room"}),
    ])
    async def test_search_filters(self, listing_repository: ListingRepository, search_data, filters, expected):
        listings, total = await listing_repository.search_listings(ListingSearchFilters(**filters))

        expected_ids = {search_data[name].id for name in expected}
        assert {l.id for l in listings} == expected_ids
        assert total == len(expected_ids)

    @pytest.mark.asyncio
    async def test_search_pagination(self, listing_repository: ListingRepository, search_data):
        page, total = await listing_repository.search_listings(ListingSearchFilters(), skip=2, limit=2)
        assert total == 3
        assert len(page) == 1

    @pytest.mark.asyncio
    async def test_in_memory_match_agrees_with_sql(self, listing_repository: ListingRepository, search_data):
        filters = ListingSearchFilters(city="Tallinn", bedrooms=3)
        listings, _ = await listing_repository.search_listings(filters)

        matched = {name for name, listing in search_data.items() if filters.matches(listing)}
        assert matched == {"tallinn_house"}
        assert [l.id for l in listings] == [search_data["tallinn_house"].id]

    @pytest.mark.asyncio
    async def test_get_pending_oldest_first(self, listing_repository: ListingRepository, test_landlord: User):
        first = await ListingFactory.create_listing(
            listing_repository, test_landlord.id, address="P 1", status=ListingStatus.PENDING
        )
        second = await ListingFactory.create_listing(
            listing_repository, test_landlord.id, address="P 2", status=ListingStatus.PENDING
        )

        pending = await listing_repository.get_pending()
        assert [l.id for l in pending] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_count_by_status(self, listing_repository: ListingRepository, search_data):
        counts = await listing_repository.count_by_status()
        assert counts == {"draft": 0, "pending": 1, "active": 3, "rejected": 0, "archived": 1}

    @pytest.mark.asyncio
    async def test_find_duplicate_ignores_case_and_closed_listings(
        self,
        listing_repository: ListingRepository,
        test_landlord: User
    ):
        await ListingFactory.create_listing(listing_repository, test_landlord.id, address="Kotzebue 12")
        await ListingFactory.create_listing(
            listing_repository, test_landlord.id, address="Old Street 1", status=ListingStatus.ARCHIVED
        )

        assert await listing_repository.find_duplicate(test_landlord.id, "KOTZEBUE 12") is not None
        assert await listing_repository.find_duplicate(test_landlord.id, "Old Street 1") is None
        assert await listing_repository.find_duplicate(uuid.uuid4(), "Kotzebue 12") is None

    @pytest.mark.asyncio
    async def test_delete_listing_removes_flags(
        self,
        listing_repository: ListingRepository,
        db_session,
        pending_listing: Listing
    ):
        flag_repo = FlaggedContentRepository(db_session)
        await flag_repo.flag_listing(pending_listing.id, "locals only")

        await listing_repository.delete_listing(pending_listing)

        assert await listing_repository.get_by_id(pending_listing.id) is None
        assert await flag_repo.get_by_listing(pending_listing.id) == []


class TestModerationRepositories:
    """Test flagged content and audit log repositories."""

    @pytest.mark.asyncio
    async def test_flag_and_resolve(self, db_session, pending_listing: Listing, test_moderator: User):
        flag_repo = FlaggedContentRepository(db_session)
        flag = await flag_repo.flag_listing(pending_listing.id, "no foreigners")

        assert flag.reason == BLOCKED_PHRASE_REASON
        assert flag.flagged_text == "no foreigners"
        assert await flag_repo.count_unreviewed() == 1

        resolved = await flag_repo.resolve_for_listing(pending_listing.id, test_moderator.id, FlagAction.REJECTED)

        assert resolved == 1
        assert await flag_repo.count_unreviewed() == 0
        [stored] = await flag_repo.get_by_listing(pending_listing.id)
        assert stored.reviewed is True
        assert stored.reviewed_by == test_moderator.id
        assert stored.action_taken == FlagAction.REJECTED

    @pytest.mark.asyncio
    async def test_log_action_and_recent(self, db_session, test_moderator: User, test_tenant: User):
        action_repo = AdminActionRepository(db_session)
        await action_repo.log_action(
            test_moderator.id, AdminActionType.VERIFY_USER, AdminTargetType.USER, test_tenant.id
        )
        await action_repo.log_action(
            test_moderator.id, AdminActionType.BAN_USER, AdminTargetType.USER, test_tenant.id, reason="spam"
        )

        recent = await action_repo.get_recent(limit=10)

        assert [a.action_type for a in recent] == [AdminActionType.BAN_USER, AdminActionType.VERIFY_USER]
        assert await action_repo.count_for_target(test_tenant.id) == 2
