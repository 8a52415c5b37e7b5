from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum


class TokenType(StrEnum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True, kw_only=True)
class Scope:
    name: str
    description: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Client:
    id: str
    name: str
    secret: str | None = None
    redirect_uri: str | None = None

    @property
    def is_confidential(self) -> bool:
        return bool(self.secret)

    def attributes(self) -> dict[str, str | None]:
        return {
            "id": self.id,
            "secret": self.secret,
            "name": self.name,
            "redirect_uri": self.redirect_uri,
        }


@dataclass(slots=True, kw_only=True)
class Token:
    token: str
    type: TokenType
    client_id: str
    user_id: str | None
    expires: int
    scopes: list[Scope] = field(default_factory=list)
    refresh: Token | None = None

    def attach_scopes(self, scopes: list[Scope]) -> None:
        known = {scope.name for scope in self.scopes}
        for scope in scopes:
            if scope.name not in known:
                self.scopes.append(scope)
                known.add(scope.name)

    @property
    def scope_names(self) -> list[str]:
        return [scope.name for scope in self.scopes]

    def is_expired(self, now: float | None = None) -> bool:
        current = time.time() if now is None else now
        return self.expires < current

    def attributes(self) -> dict[str, object]:
        return {
            "token": self.token,
            "type": str(self.type),
            "client_id": self.client_id,
            "user_id": self.user_id,
            "expires": self.expires,
            "scopes": self.scope_names,
        }


@dataclass(slots=True, kw_only=True)
class AuthorizationCode:
    code: str
    client_id: str
    user_id: str | None
    redirect_uri: str
    expires: int
    scopes: list[Scope] = field(default_factory=list)

    def attach_scopes(self, scopes: list[Scope]) -> None:
        self.scopes = list(scopes)

    def is_expired(self, now: float | None = None) -> bool:
        current = time.time() if now is None else now
        return self.expires < current

    def attributes(self) -> dict[str, object]:
        return {
            "code": self.code,
            "client_id": self.client_id,
            "user_id": self.user_id,
            "redirect_uri": self.redirect_uri,
            "expires": self.expires,
            "scopes": [scope.name for scope in self.scopes],
        }
