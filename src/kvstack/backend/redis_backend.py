"""Redis backend implementing the KeyValueBackend protocol.

Holds two clients bound to the same server and database: a blocking
redis.Redis used only for INCR (identifier allocation must return a value
immediately) and a redis.asyncio.Redis for every other command.

Usage:
    from kvstack.backend.redis_backend import RedisBackend

    backend = RedisBackend.from_url("redis://localhost:6379", db=2)
    backend = RedisBackend.from_settings(StoreSettings())
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import redis
import redis.asyncio
import tenacity
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from kvstack.backend.retry import RetryPolicy
from kvstack.core.errors import ConnectionFailure

if TYPE_CHECKING:
    from kvstack.config.settings import StoreSettings

logger = logging.getLogger(__name__)

R = TypeVar("R")

_TRANSIENT: tuple[type[BaseException], ...] = (RedisConnectionError, RedisTimeoutError)


class RedisBackend:
    """Redis implementation of KeyValueBackend.

    Connection and timeout errors surface as ConnectionFailure after the
    retry policy (if any) is exhausted. Other Redis errors propagate as-is.

    Attributes:
        sync_client: Blocking client used for INCR.
        async_client: Asyncio client used for all other commands.
    """

    def __init__(
        self,
        sync_client: redis.Redis,
        async_client: redis.asyncio.Redis,
        retry: RetryPolicy | None = None,
    ) -> None:
        """Initialize from existing clients.

        Both clients must point at the same server and database and must not
        decode responses. Prefer from_url or from_settings.

        Args:
            sync_client: Blocking Redis client.
            async_client: Asyncio Redis client.
            retry: Retry policy for connection failures (default: no retry).
        """
        self._sync = sync_client
        self._async = async_client
        self._retry = retry or RetryPolicy()

    @classmethod
    def from_url(
        cls,
        url: str,
        db: int = 0,
        socket_timeout: float | None = None,
        retry: RetryPolicy | None = None,
    ) -> RedisBackend:
        """Create a backend from a Redis URL.

        A database number in the URL path takes precedence over db.

        Args:
            url: Redis URL, e.g. redis://localhost:6379.
            db: Logical database to use.
            socket_timeout: Per-command timeout in seconds.
            retry: Retry policy for connection failures.

        Returns:
            Configured RedisBackend instance.
        """
        options: dict[str, Any] = {"db": db, "socket_timeout": socket_timeout}
        sync_client = redis.Redis.from_url(url, **options)
        async_client = redis.asyncio.Redis.from_url(url, **options)
        return cls(sync_client, async_client, retry=retry)

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> RedisBackend:
        """Create a backend from StoreSettings."""
        return cls.from_url(
            settings.url,
            db=settings.db,
            socket_timeout=settings.socket_timeout,
            retry=settings.retry_policy(),
        )

    @property
    def sync_client(self) -> redis.Redis:
        return self._sync

    @property
    def async_client(self) -> redis.asyncio.Redis:
        return self._async

    def _call(self, command: str, fn: Callable[[], R]) -> R:
        try:
            for attempt in self._retry.retrying(_TRANSIENT):
                with attempt:
                    return fn()
        except tenacity.RetryError as e:
            cause = e.last_attempt.exception()
            raise ConnectionFailure(f"Redis {command} failed: {cause}") from cause
        raise ConnectionFailure(f"Redis {command} did not run")  # pragma: no cover

    async def _acall(self, command: str, fn: Callable[[], Awaitable[R]]) -> R:
        try:
            async for attempt in self._retry.async_retrying(_TRANSIENT):
                with attempt:
                    return await fn()
        except tenacity.RetryError as e:
            cause = e.last_attempt.exception()
            raise ConnectionFailure(f"Redis {command} failed: {cause}") from cause
        raise ConnectionFailure(f"Redis {command} did not run")  # pragma: no cover

    def incr(self, key: str) -> int:
        return int(self._call("INCR", lambda: self._sync.incr(key)))

    async def get(self, key: str) -> bytes | None:
        return await self._acall("GET", lambda: self._async.get(key))

    async def set(self, key: str, value: bytes) -> None:
        await self._acall("SET", lambda: self._async.set(key, value))

    async def mset(self, mapping: Mapping[str, bytes]) -> None:
        await self._acall("MSET", lambda: self._async.mset(dict(mapping)))

    async def mget(self, keys: Sequence[str]) -> list[bytes | None]:
        return list(await self._acall("MGET", lambda: self._async.mget(list(keys))))

    async def delete(self, *keys: str) -> int:
        return int(await self._acall("DEL", lambda: self._async.delete(*keys)))

    async def sadd(self, key: str, *members: str) -> int:
        return int(await self._acall("SADD", lambda: self._async.sadd(key, *members)))

    async def srem(self, key: str, *members: str) -> int:
        return int(await self._acall("SREM", lambda: self._async.srem(key, *members)))

    async def smembers(self, key: str) -> set[str]:
        members = await self._acall("SMEMBERS", lambda: self._async.smembers(key))
        return {m.decode() if isinstance(m, bytes) else m for m in members}

    async def aclose(self) -> None:
        """Close both clients and their connection pools."""
        await self._async.aclose()
        self._sync.close()
        logger.debug("Closed Redis clients")
