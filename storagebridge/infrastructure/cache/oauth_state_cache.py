"""Ephemeral OAuth state cache.

Bridges the storage connect redirect and its callback: ``put`` stores the
initiating user's id under a random state token, ``take_once`` returns it
exactly once.

Best-effort by contract. The cache is not a source of truth, so backend
failures never surface as errors: writes are dropped with a warning and
reads degrade to "not found" (the user simply repeats the connect flow).
"""

import structlog

from storagebridge.core.constants import OAUTH_STATE_TTL_SECONDS
from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.errors import OAuthStateNotFoundError
from storagebridge.domain.protocols.cache_protocol import CacheProtocol
from storagebridge.infrastructure.cache.cache_keys import CacheKeys

logger = structlog.get_logger(__name__)


class OAuthStateCache:
    """One-time state token store on top of CacheProtocol.

    Attributes:
        _cache: Backing cache (Redis in production).
        _keys: Key builder.
        _ttl: Entry lifetime in seconds.
    """

    def __init__(
        self,
        *,
        cache: CacheProtocol,
        cache_keys: CacheKeys,
        ttl: int = OAUTH_STATE_TTL_SECONDS,
    ) -> None:
        self._cache = cache
        self._keys = cache_keys
        self._ttl = ttl

    async def put(self, state: str, user_id: str, ttl: int | None = None) -> None:
        """Store ``user_id`` under ``state``; failures are logged and dropped."""
        result = await self._cache.set(
            self._keys.oauth_storage_state(state),
            user_id,
            ttl=ttl if ttl is not None else self._ttl,
        )
        if isinstance(result, Failure):
            logger.warning(
                "oauth_state_put_failed",
                error=result.error.message,
            )

    async def take_once(self, state: str) -> Result[str, OAuthStateNotFoundError]:
        """Atomically return and remove the value stored under ``state``.

        Returns:
            Success(str): The stored user id (first call only).
            Failure(OAuthStateNotFoundError): Unknown, expired, already
                taken, or the backend is unavailable.
        """
        result = await self._cache.get_and_delete(self._keys.oauth_storage_state(state))

        match result:
            case Success(value=str() as user_id) if user_id:
                return Success(value=user_id)
            case Failure(error=error):
                logger.warning(
                    "oauth_state_take_failed",
                    error=error.message,
                )

        return Failure(
            error=OAuthStateNotFoundError(
                code=ErrorCode.OAUTH_STATE_NOT_FOUND,
                message="OAuth state is invalid, expired or already used",
                resource_id=state,
            )
        )
