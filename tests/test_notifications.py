"""
Tests for notifications and saved searches.
"""

import pytest
import uuid
from httpx import AsyncClient

from xpatly.models.listing import Listing
from xpatly.models.notification import NotificationType
from xpatly.models.user import User
from xpatly.schemas.listing import ListingSearchFilters
from xpatly.schemas.notification import SavedSearchCreate
from xpatly.services.notification import NotificationService, SavedSearchService
from xpatly.utils.exceptions import NotFoundError
from tests.conftest import ListingFactory, auth_headers

API = "/api/v1"


class TestNotificationService:

    @pytest.mark.asyncio
    async def test_unread_count_and_mark_read(
        self, notification_service: NotificationService, test_tenant: User
    ):
        first = await notification_service.notify(
            test_tenant.id, NotificationType.ADMIN_MESSAGE, "Welcome", "Welcome to Xpatly"
        )
        await notification_service.notify(test_tenant.id, NotificationType.ADMIN_MESSAGE, "Tip", "Save a search")

        notifications, unread = await notification_service.get_notifications(test_tenant)
        assert len(notifications) == 2
        assert unread == 2

        await notification_service.mark_read(first.id, test_tenant)

        unread_only, unread = await notification_service.get_notifications(test_tenant, unread_only=True)
        assert unread == 1
        assert [n.title for n in unread_only] == ["Tip"]

    @pytest.mark.asyncio
    async def test_cannot_read_someone_elses_notification(
        self, notification_service: NotificationService, test_tenant: User, test_landlord: User
    ):
        notification = await notification_service.notify(
            test_landlord.id, NotificationType.ADMIN_MESSAGE, "Private", "Only for the landlord"
        )

        with pytest.raises(NotFoundError):
            await notification_service.mark_read(notification.id, test_tenant)

    @pytest.mark.asyncio
    async def test_notify_matches_once_per_user(
        self,
        notification_service: NotificationService,
        saved_search_service: SavedSearchService,
        active_listing: Listing,
        test_tenant: User
    ):
        await saved_search_service.create_saved_search(
            SavedSearchCreate(name="Any flat", filters=ListingSearchFilters()), test_tenant
        )
        await saved_search_service.create_saved_search(
            SavedSearchCreate(name="Cheap Tallinn", filters=ListingSearchFilters(city="Tallinn", price_max=900)),
            test_tenant
        )

        assert await notification_service.notify_matches(active_listing) == 1

    @pytest.mark.asyncio
    async def test_non_matching_search_ignored(
        self,
        notification_service: NotificationService,
        saved_search_service: SavedSearchService,
        active_listing: Listing,
        test_tenant: User
    ):
        await saved_search_service.create_saved_search(
            SavedSearchCreate(name="Big houses", filters=ListingSearchFilters(bedrooms=5)), test_tenant
        )

        assert await notification_service.notify_matches(active_listing) == 0

    @pytest.mark.asyncio
    async def test_pending_listing_never_matches(
        self,
        notification_service: NotificationService,
        saved_search_service: SavedSearchService,
        pending_listing: Listing,
        test_tenant: User
    ):
        await saved_search_service.create_saved_search(
            SavedSearchCreate(name="Anything", filters=ListingSearchFilters()), test_tenant
        )

        assert await notification_service.notify_matches(pending_listing) == 0


class TestSavedSearchService:

    @pytest.mark.asyncio
    async def test_filters_stored_as_json(self, saved_search_service: SavedSearchService, test_tenant: User):
        saved = await saved_search_service.create_saved_search(
            SavedSearchCreate(name="Kalamaja", filters=ListingSearchFilters(district="Kalamaja", price_max=1000)),
            test_tenant
        )

        assert saved.filters["district"] == "Kalamaja"
        assert "city" not in saved.filters
        assert ListingSearchFilters(**saved.filters).price_max == 1000

    @pytest.mark.asyncio
    async def test_delete_other_users_search(
        self, saved_search_service: SavedSearchService, test_tenant: User, test_landlord: User
    ):
        saved = await saved_search_service.create_saved_search(SavedSearchCreate(name="Mine"), test_tenant)

        with pytest.raises(NotFoundError):
            await saved_search_service.delete_saved_search(saved.id, test_landlord)

        assert len(await saved_search_service.get_saved_searches(test_tenant)) == 1


class TestNotificationEndpoints:

    @pytest.mark.asyncio
    async def test_submission_by_verified_landlord_notifies_searchers(
        self,
        async_client: AsyncClient,
        test_tenant: User,
        test_verified_landlord: User
    ):
        tenant_headers = auth_headers(test_tenant)
        created = await async_client.post(
            f"{API}/saved-searches",
            json={"name": "Furnished Tallinn", "filters": {"city": "Tallinn", "furnished": True}},
            headers=tenant_headers,
        )
        assert created.status_code == 201
        assert created.json()["filters"] == {"city": "Tallinn", "furnished": True}

        submitted = await async_client.post(
            f"{API}/listings", data=ListingFactory.form_data(), headers=auth_headers(test_verified_landlord)
        )
        assert submitted.status_code == 201

        response = await async_client.get(f"{API}/notifications", headers=tenant_headers)
        data = response.json()
        assert data["unread_count"] == 1
        [notification] = data["notifications"]
        assert notification["type"] == "new_match"
        assert notification["listing_id"] == submitted.json()["id"]

        marked = await async_client.post(
            f"{API}/notifications/{notification['id']}/read", headers=tenant_headers
        )
        assert marked.status_code == 200
        assert marked.json()["read"] is True

        response = await async_client.get(
            f"{API}/notifications", params={"unread_only": True}, headers=tenant_headers
        )
        assert response.json() == {"notifications": [], "unread_count": 0}

    @pytest.mark.asyncio
    async def test_mark_unknown_notification(self, async_client: AsyncClient, test_tenant: User):
        response = await async_client.post(
            f"{API}/notifications/{uuid.uuid4()}/read", headers=auth_headers(test_tenant)
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_notifications_require_auth(self, async_client: AsyncClient):
        assert (await async_client.get(f"{API}/notifications")).status_code == 401

    @pytest.mark.asyncio
    async def test_saved_search_lifecycle(self, async_client: AsyncClient, test_tenant: User):
        headers = auth_headers(test_tenant)
        created = await async_client.post(
            f"{API}/saved-searches", json={"name": "Studios", "filters": {"property_type": "studio"}}, headers=headers
        )
        search_id = created.json()["id"]

        listed = await async_client.get(f"{API}/saved-searches", headers=headers)
        assert [s["id"] for s in listed.json()] == [search_id]

        deleted = await async_client.delete(f"{API}/saved-searches/{search_id}", headers=headers)
        assert deleted.status_code == 204
        assert (await async_client.get(f"{API}/saved-searches", headers=headers)).json() == []

    @pytest.mark.asyncio
    async def test_saved_search_name_too_short(self, async_client: AsyncClient, test_tenant: User):
        response = await async_client.post(
            f"{API}/saved-searches", json={"name": "  a "}, headers=auth_headers(test_tenant)
        )
        assert response.status_code == 422
