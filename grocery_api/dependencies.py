"""FastAPI dependencies for authentication and the sync engine."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from grocery_api.database import get_db, get_session_factory
from grocery_api.models.user import User
from grocery_api.redis import TokenBlocklist
from grocery_api.security import decode_access_token

# HTTP Bearer scheme
security = HTTPBearer()


async def get_token_payload(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> dict:
    """Decode the bearer token, rejecting blocklisted ones."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise credentials_exception

    if payload.get("sub") is None:
        raise credentials_exception

    jti = payload.get("jti")
    if jti and await TokenBlocklist.is_blocked(jti):
        raise credentials_exception

    return payload


async def get_current_user(
    payload: Annotated[dict, Depends(get_token_payload)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id, User.enabled.is_(True)))
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    return user


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
TokenPayload = Annotated[dict, Depends(get_token_payload)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
