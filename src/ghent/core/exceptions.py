from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ghent.core.entities import Token


class GhentError(Exception):
    pass


class OAuthError(GhentError):
    """Protocol-level failure that maps directly onto an OAuth2 error response."""

    default_error = "invalid_request"

    def __init__(self, status_code: int, description: str, *, error: str | None = None) -> None:
        super().__init__(description)
        self.status_code = status_code
        self.description = description
        self.error = error or self.default_error


class ClientError(OAuthError):
    def __init__(self, status_code: int, description: str, *, error: str | None = None) -> None:
        if error is None:
            error = "invalid_client" if status_code == 401 else "invalid_request"  # noqa: PLR2004
        super().__init__(status_code, description, error=error)


class ScopeError(OAuthError):
    default_error = "invalid_scope"


class StorageFault(GhentError):
    pass


class ScopeAssociationFault(StorageFault):
    def __init__(self, message: str, *, token: Token) -> None:
        super().__init__(message)
        self.token = token
