from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ghent.core.entities import AuthorizationCode, Client, Scope, Token, TokenType


@runtime_checkable
class StorageProtocol(Protocol):
    """Persistence boundary for client lookup and token issuance.

    Lookups return ``None`` when nothing matches; adapters raise
    ``StorageFault`` only when the backend itself fails.
    """

    async def get_client(
        self,
        client_id: str,
        secret: str | None = None,
        redirect_uri: str | None = None,
    ) -> Client | None: ...

    async def create_token(
        self,
        token: str,
        type: TokenType,  # noqa: A002
        client_id: str,
        user_id: str | None,
        expires: int,
    ) -> Token: ...

    async def associate_scopes(self, token: str, scopes: list[Scope]) -> None: ...

    async def get_token(self, token: str, type: TokenType) -> Token | None: ...  # noqa: A002

    async def delete_token(self, token: str) -> bool: ...

    async def create_authorization_code(
        self,
        code: str,
        client_id: str,
        user_id: str | None,
        redirect_uri: str,
        expires: int,
    ) -> AuthorizationCode: ...

    async def associate_authorization_code_scopes(self, code: str, scopes: list[Scope]) -> None: ...

    async def get_authorization_code(self, code: str) -> AuthorizationCode | None: ...

    async def delete_authorization_code(self, code: str) -> bool: ...
