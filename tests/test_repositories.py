"""Tests for the owner-scoped repository services."""

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.services import ShoppingItemService, ShoppingListService, StoreLocationService


class TestShoppingListService:
    @pytest.mark.asyncio
    async def test_exists_by_sync_id_is_owner_scoped(
        self, db_session: AsyncSession, user, other_user, make_list
    ):
        await make_list(user, sync_id="list-1")
        service = ShoppingListService(db_session)

        assert await service.exists_by_sync_id_and_owner("list-1", user.id) is True
        assert await service.exists_by_sync_id_and_owner("list-1", other_user.id) is False
        assert await service.exists_by_sync_id_and_owner("missing", user.id) is False

    @pytest.mark.asyncio
    async def test_find_changed_since_is_strict(self, db_session: AsyncSession, user, make_list):
        await make_list(user, sync_id="old", last_synced=datetime(2024, 1, 1))
        await make_list(user, sync_id="edge", last_synced=datetime(2024, 1, 2))
        await make_list(user, sync_id="new", last_synced=datetime(2024, 1, 3))

        changed = await ShoppingListService(db_session).find_changed_since(
            user.id, datetime(2024, 1, 2)
        )

        assert [shopping_list.sync_id for shopping_list in changed] == ["new"]


class TestShoppingItemService:
    @pytest.mark.asyncio
    async def test_lookups_are_scoped_through_the_list(
        self, db_session: AsyncSession, user, other_user, make_list, make_item
    ):
        item = await make_item(await make_list(user), sync_id="abc-1")
        service = ShoppingItemService(db_session)

        assert (await service.get_by_sync_id_and_owner("abc-1", user.id)).id == item.id
        assert await service.get_by_sync_id_and_owner("abc-1", other_user.id) is None
        assert await service.exists_by_sync_id_and_owner("abc-1", user.id) is True
        assert await service.exists_by_sync_id_and_owner("abc-1", other_user.id) is False
        assert await service.is_owned_by(item, user.id) is True
        assert await service.is_owned_by(item, other_user.id) is False

    @pytest.mark.asyncio
    async def test_list_by_owner_spans_lists(
        self, db_session: AsyncSession, user, other_user, make_list, make_item
    ):
        first = await make_item(await make_list(user, name="A"))
        second = await make_item(await make_list(user, name="B"))
        await make_item(await make_list(other_user))

        items = await ShoppingItemService(db_session).list_by_owner(user.id)

        assert [item.id for item in items] == [first.id, second.id]


class TestStoreLocationService:
    @pytest.mark.asyncio
    async def test_get_by_geofence_id_is_owner_scoped(
        self, db_session: AsyncSession, user, other_user, make_store
    ):
        store = await make_store(user, geofence_id="geo-1")
        await make_store(other_user, geofence_id="geo-2")
        service = StoreLocationService(db_session)

        assert (await service.get_by_geofence_id_and_owner("geo-1", user.id)).id == store.id
        assert await service.get_by_geofence_id_and_owner("geo-2", user.id) is None

    @pytest.mark.asyncio
    async def test_exists_by_sync_id(self, db_session: AsyncSession, user, other_user, make_store):
        await make_store(user, sync_id="store-1")
        service = StoreLocationService(db_session)

        assert await service.exists_by_sync_id_and_owner("store-1", user.id) is True
        assert await service.exists_by_sync_id_and_owner("store-1", other_user.id) is False

    @pytest.mark.asyncio
    async def test_find_nearby_uses_radius(self, db_session: AsyncSession, user, make_store):
        inside = await make_store(user, geofence_id="in", latitude=10.0, longitude=10.005)
        await make_store(user, geofence_id="out", latitude=10.0, longitude=10.02)

        found = await StoreLocationService(db_session).find_nearby(user.id, 10.0, 10.0, 0.01)

        assert [store.id for store in found] == [inside.id]
