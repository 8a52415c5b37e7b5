from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ghent.core.exceptions import ClientError
from ghent.core.orchestrator import GrantOrchestrator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ghent.core.entities import Token
    from ghent.core.request import RequestProtocol

logger = logging.getLogger(__name__)


@runtime_checkable
class Grant(Protocol):
    grant_type: str

    async def handle(self, request: RequestProtocol) -> Token: ...


class GrantRegistry:
    def __init__(self, grants: Iterable[Grant] = ()) -> None:
        self._grants: dict[str, Grant] = {}
        for grant in grants:
            self.register(grant)

    def register(self, grant: Grant) -> None:
        if grant.grant_type in self._grants:
            msg = f"grant type already registered: {grant.grant_type}"
            raise ValueError(msg)
        self._grants[grant.grant_type] = grant

    def get(self, grant_type: str) -> Grant | None:
        return self._grants.get(grant_type)

    @property
    def grant_types(self) -> list[str]:
        return list(self._grants)

    async def dispatch(self, request: RequestProtocol) -> Token:
        (grant_type,) = GrantOrchestrator.require_parameters(request, ["grant_type"])
        grant = self._grants.get(grant_type)
        if grant is None:
            logger.warning("Rejected unsupported grant type %s", grant_type)
            raise ClientError(400, f"unsupported grant type: {grant_type}", error="unsupported_grant_type")
        return await grant.handle(request)
