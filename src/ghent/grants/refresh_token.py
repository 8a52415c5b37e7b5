from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ghent.core.entities import TokenType
from ghent.core.exceptions import ClientError

if TYPE_CHECKING:
    from ghent.core.entities import Token
    from ghent.core.orchestrator import GrantOrchestrator
    from ghent.core.request import RequestProtocol

logger = logging.getLogger(__name__)


class RefreshTokenGrant:
    """Exchange a refresh token for a new access token.

    The presented refresh token is single use: it is deleted and replaced by
    a new one carrying the originally granted scopes. The access token may be
    narrowed to a subset of those scopes.
    """

    grant_type = "refresh_token"

    def __init__(self, orchestrator: GrantOrchestrator) -> None:
        self.orchestrator = orchestrator

    async def handle(self, request: RequestProtocol) -> Token:
        (refresh_value,) = self.orchestrator.require_parameters(request, ["refresh_token"])
        client = await self.orchestrator.authenticate_confidential(request)
        storage = self.orchestrator.storage

        original = await storage.get_token(refresh_value, TokenType.REFRESH)
        if original is None or original.client_id != client.id:
            logger.warning("Rejected unknown refresh token from client %s", client.id)
            raise ClientError(400, "invalid refresh token", error="invalid_grant")

        if original.is_expired(time.time()):
            await storage.delete_token(original.token)
            raise ClientError(400, "refresh token has expired", error="invalid_grant")

        scopes = self.orchestrator.validate_scopes(request.get("scope"), original=original.scopes)

        if not await storage.delete_token(original.token):
            logger.warning("Rejected replayed refresh token from client %s", client.id)
            raise ClientError(400, "invalid refresh token", error="invalid_grant")

        token = await self.orchestrator.issue_token(TokenType.ACCESS, client.id, original.user_id, scopes)
        token.refresh = await self.orchestrator.issue_token(
            TokenType.REFRESH,
            client.id,
            original.user_id,
            original.scopes,
        )
        return token
