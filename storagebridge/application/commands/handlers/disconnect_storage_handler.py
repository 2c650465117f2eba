"""DisconnectStorage command handler.

Soft-deletes the credential. The record is kept; it is never resolved again.
"""

from datetime import UTC, datetime

from storagebridge.application.commands.storage_commands import DisconnectStorage
from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.errors import IntegrationNotFoundError
from storagebridge.domain.protocols.logger_protocol import LoggerProtocol
from storagebridge.domain.protocols.storage_credential_repository import (
    StorageCredentialRepository,
)


class DisconnectStorageHandler:
    """Handler for DisconnectStorage command."""

    def __init__(
        self, credential_repo: StorageCredentialRepository, logger: LoggerProtocol
    ) -> None:
        self._credential_repo = credential_repo
        self._logger = logger

    async def handle(
        self, cmd: DisconnectStorage
    ) -> Result[None, IntegrationNotFoundError]:
        """Soft-delete a credential owned by ``cmd.owner_user_id``.

        Returns:
            Success(None): Credential disconnected.
            Failure(IntegrationNotFoundError): Absent, already deleted or
                owned by another user.
        """
        credential = await self._credential_repo.find_for_owner(
            cmd.credential_id, cmd.owner_user_id
        )
        deleted = credential is not None and await self._credential_repo.soft_delete(
            cmd.credential_id, datetime.now(UTC)
        )
        if not deleted:
            return Failure(
                error=IntegrationNotFoundError(
                    code=ErrorCode.INTEGRATION_NOT_FOUND,
                    message="Storage integration not found",
                    resource_id=str(cmd.credential_id),
                )
            )

        self._logger.info(
            "storage_disconnected",
            credential_id=str(cmd.credential_id),
            owner_user_id=str(cmd.owner_user_id),
        )
        return Success(value=None)
