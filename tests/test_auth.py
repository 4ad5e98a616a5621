"""Tests for authentication endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from grocery_api.models.user import RefreshToken
from grocery_api.security import hash_token


@pytest.fixture
def signup_data() -> dict:
    return {"username": "carol", "email": "carol@example.com", "password": "securePassword123"}


class TestSignup:
    @pytest.mark.asyncio
    async def test_signup_success(self, client: AsyncClient, signup_data: dict):
        response = await client.post("/api/auth/signup", json=signup_data)

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["username"] == "carol"
        assert data["user"]["email"] == "carol@example.com"
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 15 * 60

    @pytest.mark.asyncio
    async def test_signup_duplicate_username(self, client: AsyncClient, signup_data: dict):
        await client.post("/api/auth/signup", json=signup_data)

        response = await client.post(
            "/api/auth/signup", json={**signup_data, "email": "other@example.com"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_signup_duplicate_email(self, client: AsyncClient, signup_data: dict):
        await client.post("/api/auth/signup", json=signup_data)

        response = await client.post("/api/auth/signup", json={**signup_data, "username": "carol2"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_signup_validation(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/signup", json={"username": "x", "email": "not-an-email", "password": "123"}
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_signup_token_works(self, client: AsyncClient, signup_data: dict):
        token = (await client.post("/api/auth/signup", json=signup_data)).json()["access_token"]

        response = await client.get(
            "/api/shopping-lists", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200


class TestSignin:
    @pytest.mark.asyncio
    async def test_signin_success(self, client: AsyncClient, user):
        response = await client.post(
            "/api/auth/signin", json={"username": "alice", "password": "password123"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    @pytest.mark.asyncio
    async def test_signin_wrong_password(self, client: AsyncClient, user):
        response = await client.post(
            "/api/auth/signin", json={"username": "alice", "password": "wrong-password"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_signin_unknown_user(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/signin", json={"username": "nobody", "password": "password123"}
        )
        assert response.status_code == 401


class TestRefreshToken:
    @pytest.mark.asyncio
    async def test_refresh_rotates_token(self, client: AsyncClient, user, session_factory):
        signin = await client.post(
            "/api/auth/signin", json={"username": "alice", "password": "password123"}
        )
        old_refresh = signin.json()["refresh_token"]

        response = await client.post("/api/auth/refreshtoken", json={"refresh_token": old_refresh})

        assert response.status_code == 200
        data = response.json()
        assert data["refresh_token"] != old_refresh
        async with session_factory() as session:
            stored = (
                await session.execute(
                    select(RefreshToken).where(RefreshToken.token_hash == hash_token(old_refresh))
                )
            ).scalar_one()
        assert stored.revoked is True

    @pytest.mark.asyncio
    async def test_refresh_token_cannot_be_reused(self, client: AsyncClient, user):
        signin = await client.post(
            "/api/auth/signin", json={"username": "alice", "password": "password123"}
        )
        old_refresh = signin.json()["refresh_token"]
        await client.post("/api/auth/refreshtoken", json={"refresh_token": old_refresh})

        response = await client.post("/api/auth/refreshtoken", json={"refresh_token": old_refresh})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_refresh_token(self, client: AsyncClient):
        response = await client.post("/api/auth/refreshtoken", json={"refresh_token": "nope"})
        assert response.status_code == 401


class TestSignout:
    @pytest.mark.asyncio
    async def test_signout_revokes_and_blocklists(
        self, client: AsyncClient, user, token_blocklist
    ):
        signin = (
            await client.post("/api/auth/signin", json={"username": "alice", "password": "password123"})
        ).json()
        headers = {"Authorization": f"Bearer {signin['access_token']}"}

        response = await client.post(
            "/api/auth/signout", json={"refresh_token": signin["refresh_token"]}, headers=headers
        )

        assert response.status_code == 200
        token_blocklist["add"].assert_awaited_once()
        refresh = await client.post(
            "/api/auth/refreshtoken", json={"refresh_token": signin["refresh_token"]}
        )
        assert refresh.status_code == 401

    @pytest.mark.asyncio
    async def test_blocklisted_token_is_rejected(
        self, client: AsyncClient, auth_headers: dict, token_blocklist
    ):
        token_blocklist["is_blocked"].return_value = True

        response = await client.get("/api/shopping-lists", headers=auth_headers)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_garbage_token_is_rejected(self, client: AsyncClient):
        response = await client.get(
            "/api/shopping-lists", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401
