from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ghent.core.entities import TokenType
from ghent.core.exceptions import ClientError, StorageFault

if TYPE_CHECKING:
    from ghent.core.entities import AuthorizationCode, Client, Scope, Token
    from ghent.core.orchestrator import GrantOrchestrator
    from ghent.core.request import RequestProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationRequest:
    client: Client
    redirect_uri: str
    scopes: list[Scope]
    state: str | None = None


class AuthorizationCodeGrant:
    grant_type = "authorization_code"
    response_type = "code"

    def __init__(
        self,
        orchestrator: GrantOrchestrator,
        *,
        issue_refresh_token: bool | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.issue_refresh_token = (
            orchestrator.settings.issue_refresh_tokens if issue_refresh_token is None else issue_refresh_token
        )

    async def validate_authorization_request(self, request: RequestProtocol) -> AuthorizationRequest:
        """Check the front-channel request that precedes user consent."""
        (response_type,) = self.orchestrator.require_parameters(request, ["response_type"])
        if response_type != self.response_type:
            raise ClientError(400, f"unsupported response type: {response_type}", error="unsupported_response_type")

        client = await self.orchestrator.authenticate_public(request)
        (redirect_uri,) = self.orchestrator.require_parameters(request, ["redirect_uri"])
        scopes = self.orchestrator.validate_scopes(request.get("scope"))
        return AuthorizationRequest(
            client=client,
            redirect_uri=redirect_uri,
            scopes=scopes,
            state=request.get("state"),
        )

    async def issue_code(
        self,
        client: Client,
        user_id: str | None,
        redirect_uri: str | None,
        scopes: list[Scope],
    ) -> AuthorizationCode:
        redirect = redirect_uri or client.redirect_uri
        if not redirect:
            raise ClientError(400, "missing parameter: redirect_uri")

        storage = self.orchestrator.storage
        code = self.orchestrator.generate_token_identifier()
        expires = int(time.time()) + self.orchestrator.settings.authorization_code_ttl_seconds
        authorization_code = await storage.create_authorization_code(code, client.id, user_id, redirect, expires)

        if scopes:
            try:
                await storage.associate_authorization_code_scopes(code, scopes)
            except StorageFault:
                logger.exception("Discarding authorization code for client %s after scope write failed", client.id)
                await storage.delete_authorization_code(code)
                raise
            authorization_code.attach_scopes(scopes)
        return authorization_code

    async def handle(self, request: RequestProtocol) -> Token:
        code, redirect_uri = self.orchestrator.require_parameters(request, ["code", "redirect_uri"])
        client = await self.orchestrator.authenticate_confidential(request)
        storage = self.orchestrator.storage

        authorization_code = await storage.get_authorization_code(code)
        if authorization_code is None or authorization_code.client_id != client.id:
            logger.warning("Rejected unknown authorization code from client %s", client.id)
            raise ClientError(400, "invalid authorization code", error="invalid_grant")

        # codes are single use, including failed exchanges; only the caller whose
        # delete removed the row may issue
        if not await storage.delete_authorization_code(code):
            logger.warning("Rejected replayed authorization code from client %s", client.id)
            raise ClientError(400, "invalid authorization code", error="invalid_grant")

        if authorization_code.is_expired(time.time()):
            raise ClientError(400, "authorization code has expired", error="invalid_grant")
        if authorization_code.redirect_uri != redirect_uri:
            raise ClientError(400, "redirection URI does not match the authorization request", error="invalid_grant")

        token = await self.orchestrator.issue_token(
            TokenType.ACCESS,
            client.id,
            authorization_code.user_id,
            authorization_code.scopes,
        )
        if self.issue_refresh_token:
            token.refresh = await self.orchestrator.issue_token(
                TokenType.REFRESH,
                client.id,
                authorization_code.user_id,
                authorization_code.scopes,
            )
        return token
