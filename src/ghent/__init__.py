"""Ghent - OAuth2 grant orchestration: client authentication, scope validation and token issuance."""

from ghent.core import (
    AuthorizationCode,
    Client,
    ClientAuthenticator,
    ClientError,
    GhentError,
    GrantOrchestrator,
    GrantSettings,
    OAuthError,
    OAuthRequest,
    RequestProtocol,
    Scope,
    ScopeAssociationFault,
    ScopeError,
    ScopeSettings,
    ScopeValidator,
    SecureTokenGenerator,
    StorageFault,
    Token,
    TokenGenerator,
    TokenType,
    generate_token,
    parse_scope_string,
)
from ghent.grants import (
    AuthorizationCodeGrant,
    AuthorizationRequest,
    ClientCredentialsGrant,
    Grant,
    GrantRegistry,
    PasswordGrant,
    RefreshTokenGrant,
)
from ghent.storage import InMemoryStorage, StorageProtocol

__version__ = "0.1.0"

__all__ = [
    "AuthorizationCode",
    "AuthorizationCodeGrant",
    "AuthorizationRequest",
    "Client",
    "ClientAuthenticator",
    "ClientCredentialsGrant",
    "ClientError",
    "GhentError",
    "Grant",
    "GrantOrchestrator",
    "GrantRegistry",
    "GrantSettings",
    "InMemoryStorage",
    "OAuthError",
    "OAuthRequest",
    "PasswordGrant",
    "RefreshTokenGrant",
    "RequestProtocol",
    "Scope",
    "ScopeAssociationFault",
    "ScopeError",
    "ScopeSettings",
    "ScopeValidator",
    "SecureTokenGenerator",
    "StorageFault",
    "StorageProtocol",
    "Token",
    "TokenGenerator",
    "TokenType",
    "__version__",
    "generate_token",
    "parse_scope_string",
]
