"""Authentication service for signup, signin, and token management."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.config import settings
from grocery_api.models.user import RefreshToken
from grocery_api.schemas.auth import AuthResponse, SignupRequest, TokenResponse
from grocery_api.schemas.user import UserResponse
from grocery_api.security import (
    create_access_token,
    create_refresh_token,
    get_refresh_token_expiry,
    hash_password,
    hash_token,
    verify_password,
)
from grocery_api.services.user import UserService
from grocery_api.utils import utcnow


class UsernameOrEmailTaken(Exception):
    """Raised on signup when the username or email is already registered."""


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_service = UserService(db)

    async def signup(self, data: SignupRequest, device_info: str | None = None) -> AuthResponse:
        """Register a new user and return auth tokens."""
        if await self.user_service.is_username_or_email_taken(data.username, data.email):
            raise UsernameOrEmailTaken(data.username)

        user = await self.user_service.create(data)
        return await self._issue(user, device_info)

    async def signin(
        self, username: str, password: str, device_info: str | None = None
    ) -> AuthResponse | None:
        """Authenticate user and return auth tokens."""
        user = await self.user_service.get_by_username(username)

        # Keep the timing the same whether or not the user exists
        if user is None or not user.enabled:
            verify_password(password, hash_password("dummy-password-for-timing"))
            return None

        if not verify_password(password, user.password_hash):
            return None

        return await self._issue(user, device_info)

    async def refresh_tokens(
        self, refresh_token: str, device_info: str | None = None
    ) -> TokenResponse | None:
        """Rotate a refresh token into a new token pair."""
        result = await self.db.execute(
            select(RefreshToken).where(
                RefreshToken.token_hash == hash_token(refresh_token),
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > utcnow(),
            )
        )
        stored_token = result.scalar_one_or_none()

        if stored_token is None:
            return None

        stored_token.revoked = True

        new_access_token = create_access_token(stored_token.user_id)
        new_refresh_token = create_refresh_token()
        await self._store_refresh_token(stored_token.user_id, new_refresh_token, device_info)

        return TokenResponse(
            access_token=new_access_token,
            refresh_token=new_refresh_token,
            expires_in=settings.access_token_expire_minutes * 60,
        )

    async def signout(self, user_id: int, refresh_token: str) -> bool:
        """Revoke the refresh token presented on signout."""
        result = await self.db.execute(
            select(RefreshToken).where(
                RefreshToken.user_id == user_id,
                RefreshToken.token_hash == hash_token(refresh_token),
            )
        )
        stored_token = result.scalar_one_or_none()

        if stored_token is None:
            return False

        stored_token.revoked = True
        await self.db.flush()
        return True

    async def _issue(self, user, device_info: str | None) -> AuthResponse:
        access_token = create_access_token(user.id)
        refresh_token = create_refresh_token()
        await self._store_refresh_token(user.id, refresh_token, device_info)

        return AuthResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.access_token_expire_minutes * 60,
        )

    async def _store_refresh_token(
        self, user_id: int, token: str, device_info: str | None
    ) -> RefreshToken:
        refresh_token = RefreshToken(
            user_id=user_id,
            token_hash=hash_token(token),
            device_info=device_info,
            expires_at=get_refresh_token_expiry(),
        )
        self.db.add(refresh_token)
        await self.db.flush()
        return refresh_token
