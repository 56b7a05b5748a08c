"""Errors raised while acquiring bearer tokens"""

from typing import Iterable, Optional


class AuthError(Exception):
    """Base error for token acquisition failures"""


class InvalidParameters(AuthError):
    """Raised when grant parameters fail validation before any request is sent

    Attributes:
        grant_type: Grant type that was being validated
        missing: Names of the required fields that were absent or empty
    """

    def __init__(self, grant_type: str, missing: Iterable[str]):
        self.grant_type = grant_type
        self.missing = list(missing)
        super().__init__(
            f"Missing required parameter(s) for {grant_type} grant type: {', '.join(self.missing)}"
        )


class AuthenticationFailed(AuthError):
    """Raised when the token endpoint rejects the exchange

    Attributes:
        status: HTTP status returned by the token endpoint
        body: Raw response body
    """

    def __init__(self, status: int, body: str, message: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(message or f"Authentication failed: {status} {body}")


class TokenEndpointUnreachable(AuthError):
    """Raised when the token endpoint cannot be reached at all"""
