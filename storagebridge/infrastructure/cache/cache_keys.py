"""Cache key construction utilities.

All keys follow the pattern: {prefix}:{domain}:{resource}:{id}

Usage:
    from storagebridge.core.config import get_settings
    from storagebridge.infrastructure.cache.cache_keys import CacheKeys

    keys = CacheKeys(prefix=get_settings().cache_key_prefix)
    state_key = keys.oauth_storage_state(state)
"""

from dataclasses import dataclass


@dataclass
class CacheKeys:
    """Centralized cache key construction utilities.

    Attributes:
        prefix: Cache key prefix (typically "storagebridge").

    Example:
        keys = CacheKeys(prefix="storagebridge")
        keys.oauth_storage_state("abc")  # "storagebridge:oauth:storage:state:abc"
    """

    prefix: str

    def oauth_storage_state(self, state: str) -> str:
        """One-time OAuth state for a storage connect flow.

        Pattern: {prefix}:oauth:storage:state:{state}
        """
        return f"{self.prefix}:oauth:storage:state:{state}"
