"""Cache adapters and key construction."""

from storagebridge.infrastructure.cache.cache_keys import CacheKeys
from storagebridge.infrastructure.cache.oauth_state_cache import OAuthStateCache
from storagebridge.infrastructure.cache.redis_adapter import RedisAdapter

__all__ = ["CacheKeys", "OAuthStateCache", "RedisAdapter"]
