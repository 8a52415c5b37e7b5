from ghent.grants.authorization_code import AuthorizationCodeGrant, AuthorizationRequest
from ghent.grants.base import Grant, GrantRegistry
from ghent.grants.client_credentials import ClientCredentialsGrant
from ghent.grants.password import PasswordGrant
from ghent.grants.refresh_token import RefreshTokenGrant

__all__ = [
    "AuthorizationCodeGrant",
    "AuthorizationRequest",
    "ClientCredentialsGrant",
    "Grant",
    "GrantRegistry",
    "PasswordGrant",
    "RefreshTokenGrant",
]
