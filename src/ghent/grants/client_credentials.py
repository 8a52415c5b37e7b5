from __future__ import annotations

from typing import TYPE_CHECKING

from ghent.core.entities import TokenType

if TYPE_CHECKING:
    from ghent.core.entities import Token
    from ghent.core.orchestrator import GrantOrchestrator
    from ghent.core.request import RequestProtocol


class ClientCredentialsGrant:
    grant_type = "client_credentials"

    def __init__(self, orchestrator: GrantOrchestrator) -> None:
        self.orchestrator = orchestrator

    async def handle(self, request: RequestProtocol) -> Token:
        client = await self.orchestrator.authenticate_confidential(request)
        scopes = self.orchestrator.validate_scopes(request.get("scope"))
        return await self.orchestrator.issue_token(TokenType.ACCESS, client.id, None, scopes)
