"""Centralized constants for internal implementation details.

This module contains constants that are internal implementation details,
NOT environment-specific configuration. For environment-specific settings,
use `storagebridge/core/config.py` instead.

Categories:
- Key lengths
- Timeouts and TTLs
- Prefixes
- Limits
- Media types
"""

# =============================================================================
# Token and Key Lengths
# =============================================================================

TOKEN_BYTES: int = 32
"""Number of bytes for OAuth state token generation (32 bytes = 256 bits)."""

AES_KEY_LENGTH: int = 32
"""AES-256 encryption key length in bytes."""


# =============================================================================
# Timeouts and TTLs
# =============================================================================

PROVIDER_TIMEOUT_DEFAULT: float = 30.0
"""Default timeout for storage provider API calls in seconds."""

OAUTH_STATE_TTL_SECONDS: int = 600
"""Lifetime of a one-time OAuth state token (10 minutes)."""


# =============================================================================
# Prefixes
# =============================================================================

BEARER_PREFIX: str = "Bearer "
"""HTTP Authorization header prefix for Bearer tokens."""


# =============================================================================
# Limits
# =============================================================================

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum provider response body length kept in error details."""

DOWNLOAD_CHUNK_SIZE: int = 64 * 1024
"""Chunk size used when streaming provider downloads to disk."""

THUMBNAIL_SIZE_DEFAULT: int = 256
"""Default thumbnail edge length in pixels."""

BATCH_FILE_IDS_MAX: int = 50
"""Maximum file ids accepted by one batch metadata or batch import request."""


# =============================================================================
# Media
# =============================================================================

SUPPORTED_MEDIA_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".webp",
        ".mp4",
        ".mov",
        ".avi",
        ".mkv",
        ".wmv",
        ".flv",
        ".webm",
    }
)
"""File extensions that can be attached to a post."""
