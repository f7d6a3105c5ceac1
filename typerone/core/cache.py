"""
Token cache — TTL key-value store used for password-reset tokens.

Only a handful of operations are needed: get, set-with-expiry, atomic
multi-key set-with-expiry and delete.  ``RedisTokenCache`` is the
production implementation; anything exposing the same coroutine methods
can be injected instead (tests use an in-memory store).
"""

import logging
from typing import Protocol

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)

PASSWORD_RESET_PREFIX = "password_reset:"
PASSWORD_RESET_EMAIL_PREFIX = "password_reset_email:"


def password_reset_key(hashed_token: str) -> str:
    """hashed reset token → user id"""
    return f"{PASSWORD_RESET_PREFIX}{hashed_token}"


def password_reset_email_key(email: str) -> str:
    """email → hashed reset token (rate limit)"""
    return f"{PASSWORD_RESET_EMAIL_PREFIX}{email}"


class TokenCache(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def set_many(self, items: dict[str, str], ttl_seconds: int) -> None: ...

    async def delete(self, *keys: str) -> int: ...

    async def ping(self) -> bool: ...

    async def aclose(self) -> None: ...


class RedisTokenCache:
    """Thin ``redis.asyncio`` wrapper with explicit timeouts."""

    def __init__(self, redis_url: str, *, socket_timeout: float = 5.0):
        self.redis_url = redis_url
        self.client = aioredis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )

    async def get(self, key: str) -> str | None:
        return await self.client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self.client.set(key, value, ex=ttl_seconds)

    async def set_many(self, items: dict[str, str], ttl_seconds: int) -> None:
        # MULTI/EXEC: either every key is written or none is.
        async with self.client.pipeline(transaction=True) as pipe:
            for key, value in items.items():
                pipe.set(key, value, ex=ttl_seconds)
            await pipe.execute()

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return await self.client.delete(*keys)

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def aclose(self) -> None:
        await self.client.aclose()
        logger.info("Redis connection pool closed.")
