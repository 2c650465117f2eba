"""Integration tests for StorageCredentialRepository.

Tests cover:
- Save and retrieve (entity <-> model mapping, UTC datetimes)
- Owner scoping of find_for_owner / list_for_owner
- Merge semantics of save (reconnect overwrites in place)
- update_tokens / set_health_status
- Soft delete hides rows from every read

Architecture:
- Integration tests with a REAL SQLite database (aiosqlite)
- A file database per test under tmp_path; tables created with
  Database.create_all()
- Each step uses its own session, as requests do in the app
"""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from uuid_extensions import uuid7

from storagebridge.domain.enums import HealthStatus
from storagebridge.domain.value_objects import CredentialTokenUpdate
from storagebridge.infrastructure.persistence.database import Database
from storagebridge.infrastructure.persistence.repositories import (
    StorageCredentialRepository,
)
from tests.conftest import create_credential

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


@pytest_asyncio.fixture
async def database(tmp_path: Path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'storage.db'}")
    await db.create_all()
    yield db
    await db.close()


async def save(database: Database, credential) -> None:
    async with database.get_session() as session:
        await StorageCredentialRepository(session).save(credential)


# =============================================================================
# Save and find
# =============================================================================


@pytest.mark.integration
class TestSaveAndFind:
    """Test persistence round trip and owner scoping."""

    async def test_save_and_find_by_id(self, database):
        """Test every field survives the round trip."""
        credential = create_credential(
            provider_slug="google-drive",
            expires_at=NOW + timedelta(hours=1),
            external_account_id="1234567890",
            display_name="Test User",
            email="user@example.com",
            picture_url="https://example.com/p.png",
            quota_used_bytes=5,
            quota_total_bytes=15_000_000_000,
        )
        await save(database, credential)

        async with database.get_session() as session:
            found = await StorageCredentialRepository(session).find_by_id(
                credential.id
            )

        assert found is not None
        assert found.id == credential.id
        assert found.owner_user_id == credential.owner_user_id
        assert found.provider_slug == "google-drive"
        assert found.access_token_cipher == "access-cipher"
        assert found.refresh_token_cipher == "refresh-cipher"
        assert found.expires_at == NOW + timedelta(hours=1)
        assert found.expires_at.tzinfo is not None
        assert found.health_status == HealthStatus.HEALTHY
        assert found.email == "user@example.com"
        assert found.quota_total_bytes == 15_000_000_000

    async def test_find_missing_returns_none(self, database):
        async with database.get_session() as session:
            found = await StorageCredentialRepository(session).find_by_id(uuid7())

        assert found is None

    async def test_find_for_owner_scopes_by_user(self, database):
        """Test another user's id never matches."""
        credential = create_credential()
        await save(database, credential)

        async with database.get_session() as session:
            repo = StorageCredentialRepository(session)
            own = await repo.find_for_owner(credential.id, credential.owner_user_id)
            foreign = await repo.find_for_owner(credential.id, uuid7())

        assert own is not None
        assert foreign is None

    async def test_list_for_owner_ordered_by_creation(self, database):
        owner = uuid7()
        older = create_credential(
            owner_user_id=owner, created_at=NOW - timedelta(days=2)
        )
        newer = create_credential(
            owner_user_id=owner, created_at=NOW - timedelta(days=1)
        )
        other = create_credential()
        for credential in (newer, other, older):
            await save(database, credential)

        async with database.get_session() as session:
            listed = await StorageCredentialRepository(session).list_for_owner(owner)

        assert [c.id for c in listed] == [older.id, newer.id]

    async def test_save_existing_overwrites(self, database):
        """Test save on an existing id updates the row in place."""
        credential = create_credential(display_name="Before")
        await save(database, credential)

        credential.display_name = "After"
        credential.access_token_cipher = "new-access-cipher"
        await save(database, credential)

        async with database.get_session() as session:
            repo = StorageCredentialRepository(session)
            found = await repo.find_by_id(credential.id)
            listed = await repo.list_for_owner(credential.owner_user_id)

        assert found is not None
        assert found.display_name == "After"
        assert found.access_token_cipher == "new-access-cipher"
        assert len(listed) == 1


# =============================================================================
# Token and health updates
# =============================================================================


@pytest.mark.integration
class TestUpdates:
    """Test token refresh persistence and health status changes."""

    async def test_update_tokens(self, database):
        """Test new ciphers and expiry are stored and health reset."""
        credential = create_credential(
            health_status=HealthStatus.DEGRADED,
            quota_used_bytes=1,
            quota_total_bytes=10,
        )
        await save(database, credential)

        async with database.get_session() as session:
            await StorageCredentialRepository(session).update_tokens(
                credential.id,
                CredentialTokenUpdate(
                    access_token_cipher="rotated-access",
                    refresh_token_cipher="rotated-refresh",
                    expires_at=NOW + timedelta(hours=4),
                ),
            )

        async with database.get_session() as session:
            found = await StorageCredentialRepository(session).find_by_id(
                credential.id
            )

        assert found is not None
        assert found.access_token_cipher == "rotated-access"
        assert found.refresh_token_cipher == "rotated-refresh"
        assert found.expires_at == NOW + timedelta(hours=4)
        assert found.health_status == HealthStatus.HEALTHY
        # Quota untouched when the update carries none
        assert found.quota_used_bytes == 1
        assert found.quota_total_bytes == 10

    async def test_set_health_status(self, database):
        credential = create_credential()
        await save(database, credential)

        async with database.get_session() as session:
            await StorageCredentialRepository(session).set_health_status(
                credential.id, HealthStatus.NEEDS_REAUTH
            )

        async with database.get_session() as session:
            found = await StorageCredentialRepository(session).find_by_id(
                credential.id
            )

        assert found is not None
        assert found.health_status == HealthStatus.NEEDS_REAUTH


# =============================================================================
# Soft delete
# =============================================================================


@pytest.mark.integration
class TestSoftDelete:
    """Test soft delete semantics."""

    async def test_soft_delete_hides_credential(self, database):
        credential = create_credential()
        await save(database, credential)

        async with database.get_session() as session:
            deleted = await StorageCredentialRepository(session).soft_delete(
                credential.id, NOW
            )

        async with database.get_session() as session:
            repo = StorageCredentialRepository(session)
            by_id = await repo.find_by_id(credential.id)
            by_owner = await repo.find_for_owner(
                credential.id, credential.owner_user_id
            )
            listed = await repo.list_for_owner(credential.owner_user_id)

        assert deleted is True
        assert by_id is None
        assert by_owner is None
        assert listed == []

    async def test_soft_delete_twice_reports_false(self, database):
        """Test an already deleted credential is not deleted again."""
        credential = create_credential()
        await save(database, credential)

        async with database.get_session() as session:
            repo = StorageCredentialRepository(session)
            first = await repo.soft_delete(credential.id, NOW)
            second = await repo.soft_delete(credential.id, NOW)

        assert first is True
        assert second is False

    async def test_soft_delete_unknown_reports_false(self, database):
        async with database.get_session() as session:
            assert (
                await StorageCredentialRepository(session).soft_delete(uuid7(), NOW)
                is False
            )
