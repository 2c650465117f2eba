"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*, VALIDATION_*)
- Resource errors (*_NOT_FOUND)
- Provider errors (PROVIDER_*)
- Storage errors (STORAGE_*, MEDIA_*)
- Encryption errors (ENCRYPTION_*, DECRYPTION_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    VALIDATION_FAILED = "validation_failed"
    INVALID_INPUT = "invalid_input"

    # Resource errors
    PROVIDER_NOT_FOUND = "provider_not_found"
    INTEGRATION_NOT_FOUND = "integration_not_found"
    OAUTH_STATE_NOT_FOUND = "oauth_state_not_found"

    # Encryption errors
    ENCRYPTION_KEY_INVALID = "encryption_key_invalid"
    ENCRYPTION_FAILED = "encryption_failed"
    DECRYPTION_FAILED = "decryption_failed"

    # Provider errors
    PROVIDER_NOT_CONFIGURED = "provider_not_configured"
    PROVIDER_AUTHENTICATION_FAILED = "provider_authentication_failed"
    PROVIDER_TOKEN_REFRESH_FAILED = "provider_token_refresh_failed"
    PROVIDER_REFRESH_TOKEN_MISSING = "provider_refresh_token_missing"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    PROVIDER_RATE_LIMITED = "provider_rate_limited"
    PROVIDER_CREDENTIAL_INVALID = "provider_credential_invalid"

    # Storage errors
    STORAGE_REAUTH_REQUIRED = "storage_reauth_required"
    STORAGE_FILE_NOT_FOUND = "storage_file_not_found"
    STORAGE_CAPABILITY_NOT_SUPPORTED = "storage_capability_not_supported"
    STORAGE_EXPORT_NOT_SUPPORTED = "storage_export_not_supported"
    MEDIA_RESOLUTION_FAILED = "media_resolution_failed"

    # Cache errors
    CACHE_OPERATION_FAILED = "cache_operation_failed"
