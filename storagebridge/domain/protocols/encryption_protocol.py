"""Encryption protocol for stored provider tokens.

Defines the port for encryption/decryption operations. Infrastructure
implements it with AES-256-GCM (storagebridge/infrastructure/providers/
encryption_service.py).
"""

from dataclasses import dataclass
from typing import Protocol

from storagebridge.core.errors import DomainError
from storagebridge.core.result import Result

# =============================================================================
# Encryption Error Types (Domain Layer)
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class EncryptionError(DomainError):
    """Base encryption error.

    Does NOT inherit from Exception - used in Result types.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class EncryptionKeyError(EncryptionError):
    """Invalid encryption key (wrong length, etc.)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class DecryptionError(EncryptionError):
    """Decryption failure.

    Occurs when:
    - Wrong encryption key
    - Data has been tampered with
    - Invalid encrypted data format
    """

    pass


# =============================================================================
# Protocol Definition
# =============================================================================


class EncryptionProtocol(Protocol):
    """Symmetric string encryption for token material.

    Example:
        class TokenLifecycleManager:
            def __init__(self, *, encryption: EncryptionProtocol, ...) -> None:
                self._encryption = encryption
    """

    def encrypt(self, plaintext: str) -> Result[str, EncryptionError]:
        """Encrypt plaintext to an opaque ciphertext string."""
        ...

    def decrypt(self, ciphertext: str) -> Result[str, EncryptionError]:
        """Decrypt a ciphertext produced by encrypt()."""
        ...
