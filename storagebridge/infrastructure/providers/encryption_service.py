"""Encryption service for stored provider tokens.

Provides AES-256-GCM encryption for OAuth access and refresh tokens kept in
the ``storage_credentials`` table.

Security Properties:
    - Confidentiality: Only holder of key can decrypt
    - Integrity: Tampering is detected via GCM authentication tag
    - Uniqueness: Random IV per encryption prevents pattern analysis

Architecture:
    - Infrastructure adapter (catches cryptography exceptions)
    - Returns Result types (railway-oriented programming)
    - Uses domain error codes (ErrorCode enum)
"""

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from storagebridge.core.constants import AES_KEY_LENGTH
from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.protocols.encryption_protocol import (
    DecryptionError,
    EncryptionError,
    EncryptionKeyError,
)


class EncryptionService:
    """AES-256-GCM encryption of token strings.

    Format:
        urlsafe_b64encode(IV (12 bytes) || ciphertext || auth_tag (16 bytes))

    The text form fits a plain VARCHAR/TEXT column.

    Usage:
        >>> from storagebridge.core.config import get_settings
        >>> match EncryptionService.create(get_settings().encryption_key.encode()):
        ...     case Success(value=service):
        ...         cipher = service.encrypt("ya29.token").value
        ...     case Failure(error=error):
        ...         ...
    """

    IV_SIZE = 12  # 96 bits - NIST recommended for GCM
    MIN_ENCRYPTED_SIZE = 12 + 16  # IV + auth tag

    def __init__(self, aesgcm: AESGCM) -> None:
        """Initialize with pre-validated AESGCM instance.

        Use EncryptionService.create() factory instead of direct construction.
        """
        self._aesgcm = aesgcm

    @classmethod
    def create(cls, key: bytes) -> Result["EncryptionService", EncryptionKeyError]:
        """Create encryption service with validated key.

        Args:
            key: 32-byte (256-bit) encryption key.

        Returns:
            Success(EncryptionService) if key is valid.
            Failure(EncryptionKeyError) if key is invalid.
        """
        if len(key) != AES_KEY_LENGTH:
            return Failure(
                error=EncryptionKeyError(
                    code=ErrorCode.ENCRYPTION_KEY_INVALID,
                    message=(
                        f"Encryption key must be exactly {AES_KEY_LENGTH} bytes "
                        f"(256 bits), got {len(key)} bytes"
                    ),
                    details={
                        "expected_length": str(AES_KEY_LENGTH),
                        "actual_length": str(len(key)),
                    },
                )
            )

        return Success(value=cls(AESGCM(key)))

    def encrypt(self, plaintext: str) -> Result[str, EncryptionError]:
        """Encrypt a token string.

        Returns:
            Success(str): url-safe base64 text of IV || ciphertext || tag.
            Failure(EncryptionError): If the cipher fails.
        """
        try:
            iv = os.urandom(self.IV_SIZE)
            ciphertext = self._aesgcm.encrypt(
                iv, plaintext.encode("utf-8"), associated_data=None
            )
        except (OverflowError, ValueError) as e:
            return Failure(
                error=EncryptionError(
                    code=ErrorCode.ENCRYPTION_FAILED,
                    message=f"Encryption failed: {e}",
                )
            )

        return Success(value=base64.urlsafe_b64encode(iv + ciphertext).decode("ascii"))

    def decrypt(self, ciphertext: str) -> Result[str, EncryptionError]:
        """Decrypt text produced by encrypt().

        Returns:
            Success(str): Original token string.
            Failure(DecryptionError): Malformed input, wrong key or tampering.
        """
        try:
            encrypted = base64.urlsafe_b64decode(ciphertext.encode("ascii"))
        except (binascii.Error, UnicodeEncodeError, ValueError):
            return Failure(
                error=DecryptionError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message="Encrypted token is not valid base64",
                )
            )

        if len(encrypted) < self.MIN_ENCRYPTED_SIZE:
            return Failure(
                error=DecryptionError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message=(
                        f"Encrypted data too short: {len(encrypted)} bytes "
                        f"(minimum {self.MIN_ENCRYPTED_SIZE} bytes)"
                    ),
                )
            )

        iv = encrypted[: self.IV_SIZE]
        try:
            plaintext = self._aesgcm.decrypt(
                iv, encrypted[self.IV_SIZE :], associated_data=None
            )
        except InvalidTag:
            return Failure(
                error=DecryptionError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message="Failed to decrypt token: invalid key or tampered data",
                )
            )

        try:
            return Success(value=plaintext.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Failure(
                error=DecryptionError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message=f"Decrypted token is not valid UTF-8: {e}",
                )
            )
