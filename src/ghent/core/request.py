from __future__ import annotations

import binascii
from base64 import b64decode
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from urllib.parse import unquote_plus

from ghent.core.exceptions import ClientError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from fastapi import Request


@runtime_checkable
class RequestProtocol(Protocol):
    def get(self, name: str) -> str | None: ...

    def basic_credentials(self) -> tuple[str, str] | None: ...

    def has_authorization(self) -> bool: ...


@dataclass(frozen=True, slots=True, kw_only=True)
class OAuthRequest:
    params: Mapping[str, str] = field(default_factory=dict)
    authorization: str | None = None

    @classmethod
    async def from_fastapi(cls, request: Request) -> OAuthRequest:
        params: dict[str, str] = dict(request.query_params)
        if request.method != "GET":
            form = await request.form()
            params.update({key: value for key, value in form.items() if isinstance(value, str)})
        return cls(params=params, authorization=request.headers.get("authorization"))

    def get(self, name: str) -> str | None:
        value = self.params.get(name)
        if isinstance(value, str) and value:
            return value
        return None

    def has_authorization(self) -> bool:
        return bool(self.authorization)

    def basic_credentials(self) -> tuple[str, str] | None:
        if not self.authorization:
            return None

        scheme, _, encoded = self.authorization.partition(" ")
        if scheme.lower() != "basic" or not encoded.strip():
            return None

        try:
            decoded = b64decode(encoded.strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None

        username, separator, password = decoded.partition(":")
        if not separator:
            return None
        # RFC 6749 section 2.3.1: credentials are form-urlencoded before base64
        return unquote_plus(username), unquote_plus(password)


def require_parameters(request: RequestProtocol, names: Iterable[str]) -> list[str]:
    """Return the named parameters in order, failing on the first one absent or empty."""
    values: list[str] = []
    for name in names:
        value = request.get(name)
        if not value:
            raise ClientError(400, f"missing parameter: {name}")
        values.append(value)
    return values
