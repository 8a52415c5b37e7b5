from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ghent.core.authenticator import ClientAuthenticator
from ghent.core.entities import TokenType
from ghent.core.exceptions import ScopeAssociationFault, StorageFault
from ghent.core.request import require_parameters
from ghent.core.scopes import ScopeValidator
from ghent.core.settings import GrantSettings
from ghent.core.tokens import SecureTokenGenerator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ghent.core.entities import Client, Scope, Token
    from ghent.core.request import RequestProtocol
    from ghent.core.tokens import TokenGenerator
    from ghent.storage.protocols import StorageProtocol

logger = logging.getLogger(__name__)


class GrantOrchestrator:
    """Primitives shared by every grant type.

    Holds only injected, read-only collaborators, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        storage: StorageProtocol,
        *,
        settings: GrantSettings | None = None,
        scope_validator: ScopeValidator | None = None,
        token_generator: TokenGenerator | None = None,
    ) -> None:
        self.storage = storage
        self.settings = settings if settings is not None else GrantSettings()
        self.scope_validator = scope_validator if scope_validator is not None else ScopeValidator({})
        self.token_generator = token_generator if token_generator is not None else SecureTokenGenerator()
        self.authenticator = ClientAuthenticator(storage)

    @property
    def access_token_ttl(self) -> int:
        return self.settings.access_token_ttl_seconds

    @property
    def refresh_token_ttl(self) -> int:
        return self.settings.refresh_token_ttl_seconds

    def ttl_for(self, token_type: TokenType) -> int:
        if token_type is TokenType.REFRESH:
            return self.refresh_token_ttl
        return self.access_token_ttl

    async def authenticate_confidential(self, request: RequestProtocol) -> Client:
        return await self.authenticator.authenticate_confidential(request)

    async def authenticate_public(self, request: RequestProtocol) -> Client:
        return await self.authenticator.authenticate_public(request)

    def validate_scopes(
        self,
        requested: Iterable[str] | str | None,
        original: Iterable[Scope] | None = None,
    ) -> list[Scope]:
        return self.scope_validator.validate(requested, original)

    @staticmethod
    def require_parameters(request: RequestProtocol, names: list[str]) -> list[str]:
        return require_parameters(request, names)

    def generate_token_identifier(self) -> str:
        return self.token_generator()

    async def issue_token(
        self,
        token_type: TokenType,
        client_id: str,
        user_id: str | None,
        scopes: list[Scope] | None = None,
    ) -> Token:
        """Persist a new token, then link its scopes.

        A failure writing the token row aborts with ``StorageFault`` and
        nothing is issued. A failure linking scopes afterwards raises
        ``ScopeAssociationFault`` carrying the persisted token so the caller
        can retry the association or revoke the token.
        """
        identifier = self.generate_token_identifier()
        expires = int(time.time()) + self.ttl_for(token_type)

        token = await self.storage.create_token(identifier, token_type, client_id, user_id, expires)

        if scopes:
            try:
                await self.storage.associate_scopes(token.token, scopes)
            except StorageFault as exc:
                logger.exception(
                    "Issued %s token for client %s but failed to associate scopes %s",
                    token_type,
                    client_id,
                    [scope.name for scope in scopes],
                )
                msg = "token was persisted without its scope associations"
                raise ScopeAssociationFault(msg, token=token) from exc
            token.attach_scopes(scopes)

        logger.debug("Issued %s token for client %s expiring at %s", token_type, client_id, expires)
        return token
