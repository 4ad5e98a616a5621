"""Signup, signin, token refresh and signout endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request, status

from grocery_api.dependencies import CurrentUser, DbSession, TokenPayload
from grocery_api.redis import TokenBlocklist
from grocery_api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    RefreshTokenRequest,
    SignupRequest,
    TokenResponse,
)
from grocery_api.schemas.common import MessageResponse
from grocery_api.services.auth import AuthService, UsernameOrEmailTaken

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _device_info(request: Request) -> str | None:
    user_agent = request.headers.get("user-agent")
    return user_agent[:255] if user_agent else None


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignupRequest, request: Request, db: DbSession) -> AuthResponse:
    """Register a new account and sign it in."""
    try:
        return await AuthService(db).signup(data, _device_info(request))
    except UsernameOrEmailTaken:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email is already taken",
        )


@router.post("/signin", response_model=AuthResponse)
async def signin(data: LoginRequest, request: Request, db: DbSession) -> AuthResponse:
    result = await AuthService(db).signin(data.username, data.password, _device_info(request))
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result


@router.post("/refreshtoken", response_model=TokenResponse)
async def refresh_token(data: RefreshTokenRequest, request: Request, db: DbSession) -> TokenResponse:
    """Exchange a refresh token for a new token pair."""
    result = await AuthService(db).refresh_tokens(data.refresh_token, _device_info(request))
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )
    return result


@router.post("/signout", response_model=MessageResponse)
async def signout(
    data: LogoutRequest,
    current_user: CurrentUser,
    payload: TokenPayload,
    db: DbSession,
) -> MessageResponse:
    """Revoke the refresh token and block the current access token."""
    await AuthService(db).signout(current_user.id, data.refresh_token)

    jti = payload.get("jti")
    if jti:
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        remaining = int((expires_at - datetime.now(timezone.utc)).total_seconds())
        await TokenBlocklist.add(jti, remaining)

    return MessageResponse(message="Signed out successfully")
