"""Container module - centralized dependency injection.

Re-exports every factory so callers import from one place:

    from storagebridge.core.container import get_storage_registry, get_media_resolver

Organized by concern:
- infrastructure: cache, database, encryption, locks, filesystem
- providers: storage provider registry
- repositories: repository factories
- services: token manager, media resolver, command and query handlers
"""

from storagebridge.core.container.infrastructure import (
    get_cache,
    get_cache_keys,
    get_credential_locks,
    get_database,
    get_db_session,
    get_encryption_service,
    get_logger,
    get_media_filesystem,
    get_oauth_state_cache,
)
from storagebridge.core.container.providers import (
    build_storage_registry,
    get_storage_registry,
)
from storagebridge.core.container.repositories import (
    get_storage_credential_repository,
)
from storagebridge.core.container.services import (
    get_batch_import_handler,
    get_begin_storage_connect_handler,
    get_connect_storage_handler,
    get_disconnect_storage_handler,
    get_download_url_handler,
    get_export_file_handler,
    get_files_batch_handler,
    get_import_file_handler,
    get_list_files_handler,
    get_list_integrations_handler,
    get_media_resolver,
    get_search_files_handler,
    get_shared_drives_handler,
    get_thumbnail_handler,
    get_token_manager,
)

__all__ = [
    "build_storage_registry",
    "get_batch_import_handler",
    "get_begin_storage_connect_handler",
    "get_cache",
    "get_cache_keys",
    "get_connect_storage_handler",
    "get_credential_locks",
    "get_database",
    "get_db_session",
    "get_disconnect_storage_handler",
    "get_download_url_handler",
    "get_encryption_service",
    "get_export_file_handler",
    "get_files_batch_handler",
    "get_import_file_handler",
    "get_list_files_handler",
    "get_list_integrations_handler",
    "get_logger",
    "get_media_filesystem",
    "get_media_resolver",
    "get_oauth_state_cache",
    "get_search_files_handler",
    "get_shared_drives_handler",
    "get_storage_credential_repository",
    "get_storage_registry",
    "get_thumbnail_handler",
    "get_token_manager",
]
