from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ClientRecordProtocol(Protocol):
    id: str
    name: str
    secret: str | None


@runtime_checkable
class ClientEndpointRecordProtocol(Protocol):
    id: int
    client_id: str
    uri: str
    is_default: bool


@runtime_checkable
class TokenRecordProtocol(Protocol):
    token: str
    type: str
    client_id: str
    user_id: str | None
    expires: int


@runtime_checkable
class ScopeLinkRecordProtocol(Protocol):
    scope: str
    description: str | None


@runtime_checkable
class AuthorizationCodeRecordProtocol(Protocol):
    code: str
    client_id: str
    user_id: str | None
    redirect_uri: str
    expires: int
