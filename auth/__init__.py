"""Bearer token acquisition for the backend test harness

Provides a single polymorphic entry point, ``AuthClient.get_access_token``,
over the supported OAuth2-style grant types.
"""

from .client import AuthClient, TOKEN_PATH
from .errors import AuthError, AuthenticationFailed, InvalidParameters, TokenEndpointUnreachable
from .grants import (
    ClientCredentialsGrant,
    CustomGrant,
    ExchangeCodeGrant,
    Grant,
    GrantType,
    PasswordGrant,
    RefreshTokenGrant,
    build_grant,
    validate_grant,
)
from .models import AuthResponse

__all__ = [
    "AuthClient",
    "TOKEN_PATH",
    "AuthError",
    "AuthenticationFailed",
    "InvalidParameters",
    "TokenEndpointUnreachable",
    "ClientCredentialsGrant",
    "CustomGrant",
    "ExchangeCodeGrant",
    "Grant",
    "GrantType",
    "PasswordGrant",
    "RefreshTokenGrant",
    "build_grant",
    "validate_grant",
    "AuthResponse",
]
