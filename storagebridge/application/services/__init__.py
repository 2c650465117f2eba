"""Application services.

Usage:
    from storagebridge.application.services import MediaResolver, TokenLifecycleManager
"""

from storagebridge.application.services.credential_locks import CredentialLockRegistry
from storagebridge.application.services.media_resolver import (
    MediaResolver,
    ResolvedMedia,
)
from storagebridge.application.services.token_lifecycle import (
    TokenLifecycleManager,
    TokenState,
    evaluate_token_state,
)

__all__ = [
    "CredentialLockRegistry",
    "MediaResolver",
    "ResolvedMedia",
    "TokenLifecycleManager",
    "TokenState",
    "evaluate_token_state",
]
