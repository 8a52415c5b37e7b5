from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, TypeAlias

from ghent.core.entities import TokenType
from ghent.core.exceptions import ClientError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ghent.core.entities import Token
    from ghent.core.orchestrator import GrantOrchestrator
    from ghent.core.request import RequestProtocol

    UserResolver: TypeAlias = Callable[[str, str], str | None | Awaitable[str | None]]

logger = logging.getLogger(__name__)


class PasswordGrant:
    """Resource owner password credentials.

    ``user_resolver`` verifies the username and password and returns the
    resource owner's identifier, or ``None`` when the credentials are wrong.
    """

    grant_type = "password"

    def __init__(
        self,
        orchestrator: GrantOrchestrator,
        user_resolver: UserResolver,
        *,
        issue_refresh_token: bool | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.user_resolver = user_resolver
        self.issue_refresh_token = (
            orchestrator.settings.issue_refresh_tokens if issue_refresh_token is None else issue_refresh_token
        )

    async def handle(self, request: RequestProtocol) -> Token:
        username, password = self.orchestrator.require_parameters(request, ["username", "password"])
        client = await self.orchestrator.authenticate_confidential(request)
        scopes = self.orchestrator.validate_scopes(request.get("scope"))

        user_id = self.user_resolver(username, password)
        if inspect.isawaitable(user_id):
            user_id = await user_id
        if user_id is None:
            logger.warning("Rejected password grant for client %s: bad user credentials", client.id)
            raise ClientError(400, "user credentials are invalid", error="invalid_grant")

        token = await self.orchestrator.issue_token(TokenType.ACCESS, client.id, user_id, scopes)
        if self.issue_refresh_token:
            token.refresh = await self.orchestrator.issue_token(TokenType.REFRESH, client.id, user_id, scopes)
        return token
