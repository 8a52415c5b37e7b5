from ghent.core.authenticator import ClientAuthenticator
from ghent.core.entities import AuthorizationCode, Client, Scope, Token, TokenType
from ghent.core.exceptions import (
    ClientError,
    GhentError,
    OAuthError,
    ScopeAssociationFault,
    ScopeError,
    StorageFault,
)
from ghent.core.orchestrator import GrantOrchestrator
from ghent.core.request import OAuthRequest, RequestProtocol, require_parameters
from ghent.core.scopes import ScopeValidator, parse_scope_string
from ghent.core.settings import GrantSettings, ScopeSettings
from ghent.core.tokens import SecureTokenGenerator, TokenGenerator, generate_token

__all__ = [
    "AuthorizationCode",
    "Client",
    "ClientAuthenticator",
    "ClientError",
    "GhentError",
    "GrantOrchestrator",
    "GrantSettings",
    "OAuthError",
    "OAuthRequest",
    "RequestProtocol",
    "Scope",
    "ScopeAssociationFault",
    "ScopeError",
    "ScopeSettings",
    "ScopeValidator",
    "SecureTokenGenerator",
    "StorageFault",
    "Token",
    "TokenGenerator",
    "TokenType",
    "generate_token",
    "parse_scope_string",
    "require_parameters",
]
