"""Bearer token acquisition against the backend token endpoint"""

import asyncio
import datetime
import logging
from typing import Any, Mapping, Optional, Union

import httpx

from .errors import AuthenticationFailed, TokenEndpointUnreachable
from .grants import GRANT_CLASSES, Grant, GrantType, build_grant, validate_grant
from .models import AuthResponse

TOKEN_PATH = "/auth/token"
DEFAULT_TIMEOUT = 30.0


class AuthClient:
    """Exchanges client credentials plus a grant for a bearer token

    The client performs exactly one POST per call and never retries.
    Renewing an expired token is left to the caller.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        grant_type: Union[GrantType, str],
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.client_id = client_id
        self._client_secret = client_secret
        self.grant_type = grant_type.value if isinstance(grant_type, GrantType) else grant_type
        self.token_endpoint = f"{base_url.rstrip('/')}{TOKEN_PATH}"
        self.timeout = timeout
        self._transport = transport
        self.logger = logger or logging.getLogger(__name__)

        self.logger.info(f"Auth initialized with grant type: {self.grant_type}")

    def resolve_grant(
        self,
        grant: Union[Grant, GrantType, str, Mapping[str, Any], None] = None,
        params: Optional[Mapping[str, Any]] = None
    ) -> Grant:
        """Turn any accepted call shape into a validated grant record

        Args:
            grant: A grant record, a grant type, a parameter mapping for the
                default grant type, or None for the default grant type
            params: Parameters when ``grant`` is a grant type or None. With a
                mapping ``grant`` the two are merged, ``params`` winning

        Raises:
            InvalidParameters: If required fields are missing
        """
        if isinstance(grant, GRANT_CLASSES):
            return validate_grant(grant)
        if isinstance(grant, (GrantType, str)):
            return build_grant(grant, params)
        if isinstance(grant, Mapping):
            return build_grant(self.grant_type, {**grant, **(params or {})})
        return build_grant(self.grant_type, params)

    async def get_access_token(
        self,
        grant: Union[Grant, GrantType, str, Mapping[str, Any], None] = None,
        params: Optional[Mapping[str, Any]] = None
    ) -> AuthResponse:
        """Acquire a bearer token

        Args:
            grant: See ``resolve_grant``
            params: See ``resolve_grant``

        Returns:
            AuthResponse for the issued token

        Raises:
            InvalidParameters: If validation fails (no request is sent)
            AuthenticationFailed: If the endpoint answers non-2xx or with a malformed body
            TokenEndpointUnreachable: If the request could not be completed
        """
        resolved = self.resolve_grant(grant, params)
        self.logger.info(f"Requesting access token with grant type: {resolved.grant_type}")

        form = {"grant_type": resolved.grant_type, **resolved.form_fields()}

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                # The httpx timeout is per phase; wait_for bounds the whole exchange
                response = await asyncio.wait_for(
                    client.post(
                        self.token_endpoint,
                        data=form,
                        auth=httpx.BasicAuth(self.client_id, self._client_secret),
                        headers={"Content-Type": "application/x-www-form-urlencoded"},
                    ),
                    self.timeout,
                )
        except asyncio.TimeoutError as e:
            self.logger.error(f"Failed to get access token: timed out after {self.timeout}s")
            raise TokenEndpointUnreachable(
                f"Token endpoint {self.token_endpoint} did not answer within {self.timeout}s"
            ) from e
        except httpx.RequestError as e:
            self.logger.error(f"Failed to get access token: {e!r}")
            raise TokenEndpointUnreachable(f"Token endpoint {self.token_endpoint} unreachable: {e}") from e

        received_at = datetime.datetime.now(datetime.timezone.utc)

        if not response.is_success:
            self.logger.error(f"Failed to get access token: {response.status_code} - {response.text}")
            raise AuthenticationFailed(response.status_code, response.text)

        try:
            auth_response = AuthResponse.from_payload(response.json(), received_at=received_at)
        except (KeyError, TypeError, ValueError) as e:
            self.logger.error(f"Malformed token response ({e!r}): {response.text}")
            raise AuthenticationFailed(
                response.status_code, response.text, "Authentication failed: malformed token response"
            ) from e

        self.logger.info(f"Successfully obtained access token, expires in {auth_response.expires_in}s")
        return auth_response
