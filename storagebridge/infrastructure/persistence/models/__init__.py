"""Database models.

Importing this package registers every model on BaseModel.metadata
(used by Alembic autogenerate and Database.create_all).
"""

from storagebridge.infrastructure.persistence.models.storage_credential import (
    StorageCredentialModel,
)

__all__ = ["StorageCredentialModel"]
