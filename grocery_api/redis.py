"""Redis connection and the access token blocklist."""

import redis.asyncio as redis
from redis.asyncio import Redis

from grocery_api.config import settings

# Global Redis client
_redis_client: Redis | None = None


async def get_redis() -> Redis:
    """Get Redis client instance."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


class TokenBlocklist:
    """Access tokens revoked on signout, kept until they would expire anyway."""

    PREFIX = "token_blocklist:"

    @classmethod
    async def add(cls, jti: str, expires_in_seconds: int) -> None:
        client = await get_redis()
        await client.setex(f"{cls.PREFIX}{jti}", max(expires_in_seconds, 1), "1")

    @classmethod
    async def is_blocked(cls, jti: str) -> bool:
        client = await get_redis()
        result = await client.get(f"{cls.PREFIX}{jti}")
        return result is not None
