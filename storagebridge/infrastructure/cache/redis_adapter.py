"""Redis adapter implementing CacheProtocol.

Architecture:
- Implements CacheProtocol without inheritance (structural typing)
- Maps Redis exceptions to CacheError with proper ErrorCode
- Returns Result types for all operations
- Fail-open strategy for resilience
"""

from redis.asyncio import Redis
from redis.exceptions import RedisError

from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Result, Success
from storagebridge.infrastructure.enums import InfrastructureErrorCode
from storagebridge.infrastructure.errors import CacheError


def _decode(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    return value.decode("utf-8") if isinstance(value, bytes) else value


class RedisAdapter:
    """Redis implementation of CacheProtocol.

    Note: Does NOT inherit from CacheProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client instance.
    """

    def __init__(self, redis_client: Redis) -> None:
        """Initialize Redis adapter.

        Args:
            redis_client: Async Redis client instance.
        """
        self._redis = redis_client

    async def get(self, key: str) -> Result[str | None, CacheError]:
        """Get value from Redis.

        Returns:
            Result with value if found, None if not found, or CacheError.
        """
        try:
            return Success(value=_decode(await self._redis.get(key)))
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_OPERATION_FAILED,
                    infrastructure_code=InfrastructureErrorCode.CACHE_GET_ERROR,
                    message=f"Failed to get key '{key}' from cache",
                    details={"key": key, "error": str(e)},
                )
            )

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> Result[None, CacheError]:
        """Set value in Redis.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time to live in seconds (None = no expiration).
        """
        try:
            if ttl is not None:
                await self._redis.setex(key, ttl, value)
            else:
                await self._redis.set(key, value)
            return Success(value=None)
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_OPERATION_FAILED,
                    infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                    message=f"Failed to set key '{key}' in cache",
                    details={"key": key, "error": str(e)},
                )
            )

    async def delete(self, key: str) -> Result[bool, CacheError]:
        """Delete key from Redis.

        Returns:
            Result with True if key was deleted, False if not found.
        """
        try:
            deleted = await self._redis.delete(key)
            return Success(value=deleted > 0)
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_OPERATION_FAILED,
                    infrastructure_code=InfrastructureErrorCode.CACHE_DELETE_ERROR,
                    message=f"Failed to delete key '{key}' from cache",
                    details={"key": key, "error": str(e)},
                )
            )

    async def get_and_delete(self, key: str) -> Result[str | None, CacheError]:
        """Atomically read and remove a key (Redis GETDEL).

        A concurrent second reader of the same key always sees a miss.

        Returns:
            Result with the value if it existed, None otherwise.
        """
        try:
            return Success(value=_decode(await self._redis.getdel(key)))
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_OPERATION_FAILED,
                    infrastructure_code=InfrastructureErrorCode.CACHE_GET_ERROR,
                    message=f"Failed to take key '{key}' from cache",
                    details={"key": key, "error": str(e)},
                )
            )

    async def ping(self) -> Result[bool, CacheError]:
        """Check Redis connectivity."""
        try:
            return Success(value=bool(await self._redis.ping()))
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_OPERATION_FAILED,
                    infrastructure_code=InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
                    message="Redis ping failed",
                    details={"error": str(e)},
                )
            )
