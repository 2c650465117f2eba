"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Cache (Redis) and cache keys
- OAuth state cache
- Encryption (AES-256-GCM)
- Database (PostgreSQL)
- Credential refresh locks
- Media filesystem
- Logger
"""

from collections.abc import AsyncGenerator
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from storagebridge.core.config import get_settings
from storagebridge.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from storagebridge.application.services.credential_locks import (
        CredentialLockRegistry,
    )
    from storagebridge.domain.protocols.cache_protocol import CacheProtocol
    from storagebridge.domain.protocols.logger_protocol import LoggerProtocol
    from storagebridge.infrastructure.cache import CacheKeys, OAuthStateCache
    from storagebridge.infrastructure.providers.encryption_service import (
        EncryptionService,
    )
    from storagebridge.infrastructure.storage import LocalMediaFilesystem


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_cache() -> "CacheProtocol":
    """Get cache client singleton (app-scoped).

    Returns RedisAdapter over a shared connection pool.

    Usage:
        cache = get_cache()
        await cache.set("key", "value", ttl=60)
    """
    from redis.asyncio import ConnectionPool, Redis

    from storagebridge.infrastructure.cache import RedisAdapter

    pool = ConnectionPool.from_url(
        get_settings().redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
    )
    return RedisAdapter(redis_client=Redis(connection_pool=pool))


@lru_cache()
def get_cache_keys() -> "CacheKeys":
    """Get cache key builder (app-scoped)."""
    from storagebridge.infrastructure.cache import CacheKeys

    return CacheKeys(prefix=get_settings().cache_key_prefix)


@lru_cache()
def get_oauth_state_cache() -> "OAuthStateCache":
    """Get one-time OAuth state cache (app-scoped)."""
    from storagebridge.infrastructure.cache import OAuthStateCache

    return OAuthStateCache(
        cache=get_cache(),
        cache_keys=get_cache_keys(),
        ttl=get_settings().oauth_state_ttl_seconds,
    )


@lru_cache()
def get_encryption_service() -> "EncryptionService":
    """Get encryption service singleton (app-scoped).

    Raises:
        RuntimeError: If the configured encryption key is invalid.
    """
    from storagebridge.core.result import Failure, Success
    from storagebridge.infrastructure.providers.encryption_service import (
        EncryptionService,
    )

    result = EncryptionService.create(get_settings().encryption_key.encode("utf-8"))

    match result:
        case Success(value=service):
            return service
        case Failure(error=err):
            raise RuntimeError(
                f"Failed to initialize encryption service: {err.message}"
            )


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Use get_db_session() for per-request sessions.
    """
    settings = get_settings()
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


@lru_cache()
def get_credential_locks() -> "CredentialLockRegistry":
    """Get the per-credential refresh lock registry (app-scoped).

    Must be a process-wide singleton: request-scoped token managers share it
    so that concurrent requests for one credential refresh only once.
    """
    from storagebridge.application.services.credential_locks import (
        CredentialLockRegistry,
    )

    return CredentialLockRegistry()


@lru_cache()
def get_media_filesystem() -> "LocalMediaFilesystem":
    """Get local media filesystem (app-scoped)."""
    from storagebridge.infrastructure.storage import LocalMediaFilesystem

    return LocalMediaFilesystem(temp_dir=Path(get_settings().media_temp_dir))


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Get the application logger (app-scoped).

    structlog's lazy proxy satisfies LoggerProtocol; processors configured
    by configure_logging() at startup apply to it.
    """
    import structlog

    return structlog.get_logger("storagebridge")


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    Commits on success, rolls back on exception, always closes.

    Usage:
        @router.get("/integrations")
        async def list_integrations(
            session: AsyncSession = Depends(get_db_session),
        ): ...
    """
    db = get_database()
    async with db.get_session() as session:
        yield session
