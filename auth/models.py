"""Data models for token endpoint responses"""

import datetime
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class AuthResponse:
    """Result of a successful token exchange

    Attributes:
        access_token: Bearer token for backend requests
        expires_in: Token lifetime in seconds
        expires_at: Absolute expiry, computed when the response was received
        refresh_token: Rotated refresh token, if the backend issued one
        token_type: Token type reported by the backend (usually "bearer")
        client_id: Client the token was issued to
        internal_client: Whether the client is internal to the backend
        client_service: Service the client belongs to
        account_id: Account the token authenticates as
    """
    access_token: str
    expires_in: int
    expires_at: datetime.datetime
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    client_id: Optional[str] = None
    internal_client: Optional[Any] = None
    client_service: Optional[str] = None
    account_id: Optional[str] = None

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        received_at: Optional[datetime.datetime] = None
    ) -> "AuthResponse":
        """Build from the token endpoint JSON body

        Args:
            payload: Decoded JSON body
            received_at: Time the response arrived (defaults to now, UTC)

        Raises:
            KeyError: If access_token or expires_in is missing
            ValueError: If expires_in is not a number
        """
        received_at = received_at or _utc_now()
        expires_in = int(payload["expires_in"])
        return cls(
            access_token=payload["access_token"],
            expires_in=expires_in,
            expires_at=received_at + datetime.timedelta(seconds=expires_in),
            refresh_token=payload.get("refresh_token"),
            token_type=payload.get("token_type", "bearer"),
            client_id=payload.get("client_id"),
            internal_client=payload.get("internal_client"),
            client_service=payload.get("client_service"),
            account_id=payload.get("account_id"),
        )

    def seconds_until_expiry(self, now: Optional[datetime.datetime] = None) -> float:
        return (self.expires_at - (now or _utc_now())).total_seconds()

    def is_expired(self, now: Optional[datetime.datetime] = None) -> bool:
        return self.seconds_until_expiry(now) <= 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-friendly record shape"""
        return {
            "access_token": self.access_token,
            "expires_in": self.expires_in,
            "expires_at": self.expires_at.isoformat().replace("+00:00", "Z"),
            "refresh_token": self.refresh_token,
            "token_type": self.token_type,
            "client_id": self.client_id,
            "internal_client": self.internal_client,
            "client_service": self.client_service,
            "account_id": self.account_id,
        }
