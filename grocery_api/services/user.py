"""User service for account lookups and registration."""

from sqlalchemy import exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.models.user import User
from grocery_api.schemas.auth import SignupRequest
from grocery_api.security import hash_password


class UserService:
    """Service for user management operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def is_username_or_email_taken(self, username: str, email: str) -> bool:
        result = await self.db.execute(
            select(exists().where(or_(User.username == username, User.email == email)))
        )
        return bool(result.scalar())

    async def create(self, data: SignupRequest) -> User:
        """Create a new user."""
        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
        )
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user
