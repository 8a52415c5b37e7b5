from __future__ import annotations

import asyncio
import secrets
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from ghent.core.entities import AuthorizationCode, Client, Token
from ghent.core.exceptions import StorageFault
from ghent.storage.protocols import StorageProtocol

if TYPE_CHECKING:
    from ghent.core.entities import Scope, TokenType


@dataclass(slots=True, kw_only=True)
class MemoryClient:
    id: str
    name: str
    secret: str | None = None
    redirect_uris: list[str] = field(default_factory=list)


class InMemoryStorage(StorageProtocol):
    """Dict-backed store.

    Registered redirect URIs are matched by exact string equality; without a
    URI the first registered one is reported as the client's redirect URI.
    """

    def __init__(self) -> None:
        self._clients: dict[str, MemoryClient] = {}
        self._tokens: dict[str, Token] = {}
        self._token_scopes: dict[str, dict[str, Scope]] = {}
        self._codes: dict[str, AuthorizationCode] = {}
        self._code_scopes: dict[str, dict[str, Scope]] = {}
        self._lock = asyncio.Lock()

    def add_client(
        self,
        client_id: str,
        *,
        name: str,
        secret: str | None = None,
        redirect_uris: list[str] | None = None,
    ) -> MemoryClient:
        client = MemoryClient(id=client_id, name=name, secret=secret, redirect_uris=list(redirect_uris or []))
        self._clients[client_id] = client
        return client

    async def get_client(
        self,
        client_id: str,
        secret: str | None = None,
        redirect_uri: str | None = None,
    ) -> Client | None:
        record = self._clients.get(client_id)
        if record is None:
            return None

        if secret is not None and (
            record.secret is None or not secrets.compare_digest(record.secret.encode(), secret.encode())
        ):
            return None

        if redirect_uri is not None:
            if redirect_uri not in record.redirect_uris:
                return None
            matched = redirect_uri
        else:
            matched = record.redirect_uris[0] if record.redirect_uris else None

        return Client(id=record.id, name=record.name, secret=record.secret, redirect_uri=matched)

    async def create_token(
        self,
        token: str,
        type: TokenType,  # noqa: A002
        client_id: str,
        user_id: str | None,
        expires: int,
    ) -> Token:
        async with self._lock:
            if token in self._tokens:
                msg = "token identifier already exists"
                raise StorageFault(msg)
            stored = Token(token=token, type=type, client_id=client_id, user_id=user_id, expires=expires)
            self._tokens[token] = stored
            self._token_scopes[token] = {}
        return replace(stored, scopes=[])

    async def associate_scopes(self, token: str, scopes: list[Scope]) -> None:
        async with self._lock:
            links = self._token_scopes.get(token)
            if links is None:
                msg = f"cannot associate scopes with unknown token {token[:8]}..."
                raise StorageFault(msg)
            for scope in scopes:
                links.setdefault(scope.name, scope)

    async def get_token(self, token: str, type: TokenType) -> Token | None:  # noqa: A002
        stored = self._tokens.get(token)
        if stored is None or stored.type != type:
            return None
        return replace(stored, scopes=list(self._token_scopes.get(token, {}).values()))

    async def delete_token(self, token: str) -> bool:
        async with self._lock:
            self._token_scopes.pop(token, None)
            return self._tokens.pop(token, None) is not None

    async def create_authorization_code(
        self,
        code: str,
        client_id: str,
        user_id: str | None,
        redirect_uri: str,
        expires: int,
    ) -> AuthorizationCode:
        async with self._lock:
            if code in self._codes:
                msg = "authorization code already exists"
                raise StorageFault(msg)
            stored = AuthorizationCode(
                code=code,
                client_id=client_id,
                user_id=user_id,
                redirect_uri=redirect_uri,
                expires=expires,
            )
            self._codes[code] = stored
            self._code_scopes[code] = {}
        return replace(stored, scopes=[])

    async def associate_authorization_code_scopes(self, code: str, scopes: list[Scope]) -> None:
        async with self._lock:
            links = self._code_scopes.get(code)
            if links is None:
                msg = "cannot associate scopes with unknown authorization code"
                raise StorageFault(msg)
            for scope in scopes:
                links.setdefault(scope.name, scope)

    async def get_authorization_code(self, code: str) -> AuthorizationCode | None:
        stored = self._codes.get(code)
        if stored is None:
            return None
        return replace(stored, scopes=list(self._code_scopes.get(code, {}).values()))

    async def delete_authorization_code(self, code: str) -> bool:
        async with self._lock:
            self._code_scopes.pop(code, None)
            return self._codes.pop(code, None) is not None
