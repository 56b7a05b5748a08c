"""Grant types and their parameter records

Each known grant type has its own frozen dataclass carrying exactly the
fields that grant needs. ``CustomGrant`` is the open variant for extension
grant types: it is never validated and forwards every parameter as given.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union

from .errors import InvalidParameters


class GrantType(str, Enum):
    """Grant types understood by the token endpoint"""
    CLIENT_CREDENTIALS = "client_credentials"
    EXCHANGE_CODE = "exchange_code"
    REFRESH_TOKEN = "refresh_token"
    PASSWORD = "password"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class ClientCredentialsGrant:
    """Client credentials grant, authenticated by the Basic header alone"""
    grant_type: ClassVar[str] = GrantType.CLIENT_CREDENTIALS.value

    def missing_fields(self) -> List[str]:
        return []

    def form_fields(self) -> Dict[str, str]:
        return {}


@dataclass(frozen=True)
class ExchangeCodeGrant:
    """One-time exchange code grant"""
    exchange_code: str
    grant_type: ClassVar[str] = GrantType.EXCHANGE_CODE.value

    def missing_fields(self) -> List[str]:
        return [] if self.exchange_code else ["exchange_code"]

    def form_fields(self) -> Dict[str, str]:
        return {"exchange_code": self.exchange_code}


@dataclass(frozen=True)
class RefreshTokenGrant:
    """Refresh token grant"""
    refresh_token: str
    grant_type: ClassVar[str] = GrantType.REFRESH_TOKEN.value

    def missing_fields(self) -> List[str]:
        return [] if self.refresh_token else ["refresh_token"]

    def form_fields(self) -> Dict[str, str]:
        return {"refresh_token": self.refresh_token}


@dataclass(frozen=True)
class PasswordGrant:
    """Resource owner password grant"""
    username: str
    password: str = field(repr=False)
    grant_type: ClassVar[str] = GrantType.PASSWORD.value

    def missing_fields(self) -> List[str]:
        missing = []
        if not self.username:
            missing.append("username")
        if not self.password:
            missing.append("password")
        return missing

    def form_fields(self) -> Dict[str, str]:
        return {"username": self.username, "password": self.password}


@dataclass(frozen=True)
class CustomGrant:
    """Extension grant type; parameters are forwarded verbatim"""
    grant_type: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def missing_fields(self) -> List[str]:
        return []

    def form_fields(self) -> Dict[str, str]:
        return {key: _stringify(value) for key, value in self.params.items()}


Grant = Union[ClientCredentialsGrant, ExchangeCodeGrant, RefreshTokenGrant, PasswordGrant, CustomGrant]

GRANT_CLASSES = (ClientCredentialsGrant, ExchangeCodeGrant, RefreshTokenGrant, PasswordGrant, CustomGrant)


def validate_grant(grant: Grant) -> Grant:
    """Raise InvalidParameters if the grant is missing required fields

    Args:
        grant: Grant record to check

    Returns:
        The same grant, for chaining
    """
    missing = grant.missing_fields()
    if missing:
        raise InvalidParameters(grant.grant_type, missing)
    return grant


def build_grant(grant_type: Union[GrantType, str], params: Optional[Mapping[str, Any]] = None) -> Grant:
    """Build and validate the grant record for a grant type

    Args:
        grant_type: One of GrantType or any custom grant type string
        params: Grant-specific parameters

    Returns:
        A validated grant record

    Raises:
        InvalidParameters: If a known grant type is missing required fields
    """
    params = dict(params or {})
    if isinstance(grant_type, GrantType):
        grant_type = grant_type.value

    if grant_type == GrantType.CLIENT_CREDENTIALS:
        grant: Grant = ClientCredentialsGrant()
    elif grant_type == GrantType.EXCHANGE_CODE:
        grant = ExchangeCodeGrant(exchange_code=params.get("exchange_code") or "")
    elif grant_type == GrantType.REFRESH_TOKEN:
        grant = RefreshTokenGrant(refresh_token=params.get("refresh_token") or "")
    elif grant_type == GrantType.PASSWORD:
        grant = PasswordGrant(
            username=params.get("username") or "",
            password=params.get("password") or "",
        )
    else:
        grant = CustomGrant(grant_type=grant_type, params=params)

    return validate_grant(grant)
