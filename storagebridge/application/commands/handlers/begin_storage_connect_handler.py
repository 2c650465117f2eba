"""BeginStorageConnect command handler.

Builds the provider consent URL and remembers which user the embedded
state token belongs to.
"""

from storagebridge.application.commands.storage_commands import BeginStorageConnect
from storagebridge.core.errors import DomainError
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.protocols.logger_protocol import LoggerProtocol
from storagebridge.domain.protocols.storage_provider_protocol import (
    AuthorizationRequest,
    StorageProviderLookup,
)
from storagebridge.infrastructure.cache import OAuthStateCache


class BeginStorageConnectHandler:
    """Handler for BeginStorageConnect command.

    Dependencies (injected via constructor):
        - StorageProviderLookup: Adapter for the requested provider
        - OAuthStateCache: One-time state -> user mapping
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        providers: StorageProviderLookup,
        state_cache: OAuthStateCache,
        logger: LoggerProtocol,
    ) -> None:
        self._providers = providers
        self._state_cache = state_cache
        self._logger = logger

    async def handle(
        self, cmd: BeginStorageConnect
    ) -> Result[AuthorizationRequest, DomainError]:
        """Return the authorization URL for ``cmd.provider_slug``.

        Returns:
            Success(AuthorizationRequest): URL plus state.
            Failure(ProviderNotFoundError): Unknown provider.
            Failure(ProviderNotConfiguredError): Provider disabled at deploy time.
        """
        adapter_result = self._providers.get(cmd.provider_slug)
        if isinstance(adapter_result, Failure):
            return adapter_result

        auth_result = adapter_result.value.begin_auth()
        if isinstance(auth_result, Failure):
            return auth_result
        request = auth_result.value

        # A lost state write surfaces later as an unknown state on callback.
        await self._state_cache.put(request.state, str(cmd.owner_user_id))

        self._logger.info(
            "storage_connect_started",
            provider=cmd.provider_slug,
            owner_user_id=str(cmd.owner_user_id),
        )
        return Success(value=request)
