"""Repository dependency factories.

Request-scoped repository instances sharing the request's session.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storagebridge.core.container.infrastructure import get_db_session
from storagebridge.infrastructure.persistence.repositories import (
    StorageCredentialRepository,
)


async def get_storage_credential_repository(
    session: AsyncSession = Depends(get_db_session),
) -> StorageCredentialRepository:
    """Get storage credential repository (request-scoped).

    Args:
        session: Database session for request duration.
            Injected via Depends(get_db_session).
    """
    return StorageCredentialRepository(session=session)
