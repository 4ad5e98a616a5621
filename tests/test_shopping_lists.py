"""Tests for shopping list endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from grocery_api.models import ShoppingItem


class TestShoppingLists:
    @pytest.mark.asyncio
    async def test_create_list(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/shopping-lists", json={"name": "Weekly"}, headers=auth_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Weekly"
        assert data["syncId"]
        assert data["version"] == 0
        assert data["createdAt"] == data["updatedAt"]

    @pytest.mark.asyncio
    async def test_create_list_validation(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/shopping-lists", json={"name": ""}, headers=auth_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_only_own(
        self, client: AsyncClient, auth_headers: dict, user, other_user, make_list
    ):
        mine = await make_list(user, name="Mine")
        await make_list(other_user, name="Theirs")

        response = await client.get("/api/shopping-lists", headers=auth_headers)

        assert response.status_code == 200
        assert [entry["id"] for entry in response.json()] == [mine.id]

    @pytest.mark.asyncio
    async def test_get_list(self, client: AsyncClient, auth_headers: dict, user, make_list):
        shopping_list = await make_list(user, name="Weekly")

        response = await client.get(f"/api/shopping-lists/{shopping_list.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["syncId"] == shopping_list.sync_id

    @pytest.mark.asyncio
    async def test_foreign_list_is_not_found(
        self, client: AsyncClient, auth_headers: dict, other_user, make_list
    ):
        foreign = await make_list(other_user)

        get = await client.get(f"/api/shopping-lists/{foreign.id}", headers=auth_headers)
        put = await client.put(
            f"/api/shopping-lists/{foreign.id}", json={"name": "Hijacked"}, headers=auth_headers
        )
        delete = await client.delete(f"/api/shopping-lists/{foreign.id}", headers=auth_headers)

        assert get.status_code == 404
        assert put.status_code == 404
        assert delete.status_code == 404

    @pytest.mark.asyncio
    async def test_update_list_bumps_version(
        self, client: AsyncClient, auth_headers: dict, user, make_list
    ):
        shopping_list = await make_list(user, name="Old")

        response = await client.put(
            f"/api/shopping-lists/{shopping_list.id}", json={"name": "New"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["name"] == "New"
        assert response.json()["version"] == 1

    @pytest.mark.asyncio
    async def test_delete_list_removes_items(
        self, client: AsyncClient, auth_headers: dict, user, make_list, make_item, session_factory
    ):
        shopping_list = await make_list(user)
        await make_item(shopping_list)
        await make_item(shopping_list, name="Eggs")

        response = await client.delete(f"/api/shopping-lists/{shopping_list.id}", headers=auth_headers)

        assert response.status_code == 204
        async with session_factory() as session:
            remaining = (
                await session.execute(
                    select(func.count())
                    .select_from(ShoppingItem)
                    .where(ShoppingItem.shopping_list_id == shopping_list.id)
                )
            ).scalar_one()
        assert remaining == 0
        follow_up = await client.get(f"/api/shopping-lists/{shopping_list.id}", headers=auth_headers)
        assert follow_up.status_code == 404
