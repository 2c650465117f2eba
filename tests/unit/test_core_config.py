"""Tests for storagebridge/core/config.py.

Covers:
- Required fields and encryption key validation
- Provider redirect URIs derived from backend_url
- Environment helper properties

Reference:
    - storagebridge/core/config.py
"""

import pytest
from pydantic import ValidationError

from storagebridge.core.enums import Environment
from tests.conftest import TEST_ENCRYPTION_KEY, make_settings


# =============================================================================
# Validation
# =============================================================================


@pytest.mark.unit
class TestSettingsValidation:
    """Test field validation."""

    def test_valid_settings_load(self):
        """Test settings with all required fields load."""
        settings = make_settings()

        assert settings.encryption_key == TEST_ENCRYPTION_KEY
        assert settings.environment == Environment.TESTING

    def test_short_encryption_key_rejected(self):
        """Test an encryption key that is not 32 bytes fails validation."""
        with pytest.raises(ValidationError, match="encryption_key"):
            make_settings(encryption_key="too-short")

    def test_backend_url_trailing_slash_removed(self):
        """Test trailing slashes are stripped from backend_url."""
        settings = make_settings(backend_url="https://api.example.com///")

        assert settings.backend_url == "https://api.example.com"

    def test_providers_optional(self):
        """Test provider credentials may be left unset."""
        settings = make_settings(
            google_drive_client_id=None,
            google_drive_client_secret=None,
            dropbox_client_id=None,
            dropbox_client_secret=None,
        )

        assert settings.google_drive_client_id is None
        assert settings.dropbox_client_id is None


# =============================================================================
# Derived values
# =============================================================================


@pytest.mark.unit
class TestSettingsDerivedValues:
    """Test values derived from other settings."""

    def test_redirect_uris_default_to_backend_callback(self):
        """Test redirect URIs are built from backend_url and api_prefix."""
        settings = make_settings()

        assert (
            settings.google_drive_redirect_uri
            == "https://api.example.com/api/storage/callback/google-drive"
        )
        assert (
            settings.dropbox_redirect_uri
            == "https://api.example.com/api/storage/callback/dropbox"
        )

    def test_explicit_redirect_uri_kept(self):
        """Test an explicit redirect URI is not overwritten."""
        settings = make_settings(dropbox_redirect_uri="https://other.example/cb")

        assert settings.dropbox_redirect_uri == "https://other.example/cb"

    def test_json_logs_outside_development(self):
        """Test JSON logs are used everywhere except development."""
        assert make_settings().use_json_logs is True
        assert make_settings(environment="development").use_json_logs is False

    def test_environment_properties(self):
        """Test environment helper properties."""
        settings = make_settings(environment="production")

        assert settings.is_production is True
        assert settings.is_development is False
        assert settings.is_testing is False
