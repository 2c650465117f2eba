"""Unit tests for EncryptionService.

Tests cover:
- Factory create() with valid/invalid key lengths
- Token round trip and per-call IV randomness
- Tamper detection and malformed ciphertext

Architecture:
- Pure unit tests (no external dependencies)
- Uses Result pattern (Success/Failure)
"""

import base64
import os

import pytest

from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Success
from storagebridge.domain.protocols.encryption_protocol import (
    DecryptionError,
    EncryptionKeyError,
)
from storagebridge.infrastructure.providers.encryption_service import (
    EncryptionService,
)


# =============================================================================
# Test Constants
# =============================================================================

VALID_KEY = os.urandom(32)  # 256 bits
SHORT_KEY = os.urandom(16)  # 128 bits (too short)


@pytest.fixture
def service() -> EncryptionService:
    result = EncryptionService.create(VALID_KEY)
    assert isinstance(result, Success)
    return result.value


# =============================================================================
# Test: Factory Creation
# =============================================================================


@pytest.mark.unit
class TestEncryptionServiceCreate:
    """Test EncryptionService.create() factory method."""

    def test_create_with_valid_key_returns_success(self):
        """Valid 32-byte key should create service successfully."""
        result = EncryptionService.create(VALID_KEY)

        assert isinstance(result, Success)
        assert isinstance(result.value, EncryptionService)

    def test_create_with_short_key_returns_failure(self):
        """Key shorter than 32 bytes should fail."""
        result = EncryptionService.create(SHORT_KEY)

        assert isinstance(result, Failure)
        assert isinstance(result.error, EncryptionKeyError)
        assert result.error.code == ErrorCode.ENCRYPTION_KEY_INVALID
        assert "16 bytes" in result.error.message


# =============================================================================
# Test: Encrypt / Decrypt
# =============================================================================


@pytest.mark.unit
class TestEncryptionServiceTokens:
    """Test token encryption."""

    def test_decrypt_returns_original_token(self, service: EncryptionService):
        """Decrypting encrypted text yields the original token."""
        encrypted = service.encrypt("ya29.a0AfH6SMB-token")

        assert isinstance(encrypted, Success)
        decrypted = service.decrypt(encrypted.value)
        assert decrypted == Success(value="ya29.a0AfH6SMB-token")

    def test_ciphertext_differs_per_call(self, service: EncryptionService):
        """Random IV makes two encryptions of the same token differ."""
        first = service.encrypt("same-token")
        second = service.encrypt("same-token")

        assert isinstance(first, Success) and isinstance(second, Success)
        assert first.value != second.value

    def test_ciphertext_does_not_contain_plaintext(self, service: EncryptionService):
        """Ciphertext text never contains the token."""
        encrypted = service.encrypt("sl.secret-dropbox-token")

        assert isinstance(encrypted, Success)
        assert "secret-dropbox-token" not in encrypted.value

    def test_wrong_key_fails(self, service: EncryptionService):
        """Ciphertext from another key cannot be decrypted."""
        other = EncryptionService.create(os.urandom(32))
        assert isinstance(other, Success)
        encrypted = other.value.encrypt("token")
        assert isinstance(encrypted, Success)

        result = service.decrypt(encrypted.value)

        assert isinstance(result, Failure)
        assert isinstance(result.error, DecryptionError)
        assert result.error.code == ErrorCode.DECRYPTION_FAILED

    def test_tampered_ciphertext_fails(self, service: EncryptionService):
        """Flipping one byte is detected by the auth tag."""
        encrypted = service.encrypt("token")
        assert isinstance(encrypted, Success)
        raw = bytearray(base64.urlsafe_b64decode(encrypted.value))
        raw[-1] ^= 0x01

        result = service.decrypt(base64.urlsafe_b64encode(bytes(raw)).decode())

        assert isinstance(result, Failure)
        assert "tampered" in result.error.message

    def test_too_short_ciphertext_fails(self, service: EncryptionService):
        """Input shorter than IV + tag is rejected."""
        result = service.decrypt(base64.urlsafe_b64encode(b"short").decode())

        assert isinstance(result, Failure)
        assert "too short" in result.error.message

    def test_invalid_base64_fails(self, service: EncryptionService):
        """Non-base64 input is rejected."""
        result = service.decrypt("not base64 at all!!")

        assert isinstance(result, Failure)
        assert isinstance(result.error, DecryptionError)
