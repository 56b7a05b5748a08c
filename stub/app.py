"""
FastAPI stand-in for the game backend.

Implements the token endpoint plus the lightswitch and calendar endpoints
the bundled suites exercise, so the harness can be run end to end locally.
"""
import base64
import datetime
import logging
import secrets
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qs

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = 28800
CLIENT_SERVICE = "fortnite"


class StubError(HTTPException):
    """Error rendered in the backend's errorCode/errorMessage shape"""

    def __init__(self, status_code: int, error_code: str, message: str):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code


def _iso(moment: datetime.datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _basic_credentials(header: Optional[str]) -> Optional[tuple]:
    if not header or not header.lower().startswith("basic "):
        return None
    try:
        decoded = base64.b64decode(header[6:].strip()).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None
    client_id, sep, client_secret = decoded.partition(":")
    return (client_id, client_secret) if sep else None


def service_status(service_id: str) -> Dict[str, Any]:
    return {
        "serviceInstanceId": service_id.lower(),
        "status": "UP",
        "message": "Fortnite is online",
        "maintenanceUri": None,
        "overrideCatalogIds": ["a7f138b2e51945ffbfdacc1af0541053"],
        "allowedActions": ["PLAY", "DOWNLOAD"],
        "banned": False,
        "launcherInfoDTO": {
            "appName": "Fortnite",
            "catalogItemId": "4fe75bbc5a674f4f9b356b5c90567da5",
            "namespace": "fn",
        },
    }


def timeline() -> Dict[str, Any]:
    now = datetime.datetime.now(datetime.timezone.utc)
    valid_from = _iso(now - datetime.timedelta(days=1))
    expires = _iso(now + datetime.timedelta(days=1))
    return {
        "channels": {
            "client-matchmaking": {
                "states": [{"validFrom": valid_from, "activeEvents": [], "state": {"region": {}}}],
                "cacheExpire": expires,
            },
            "client-events": {
                "states": [{
                    "validFrom": valid_from,
                    "activeEvents": [
                        {"eventType": "EventFlag.LobbySeason", "activeUntil": expires, "activeSince": valid_from},
                    ],
                    "state": {"seasonNumber": 1, "seasonTemplateId": "AthenaSeason:athenaseason1"},
                }],
                "cacheExpire": expires,
            },
        },
        "eventsTimeOffsetHrs": 0,
        "cacheIntervalMins": 10,
        "currentTime": _iso(now),
    }


def create_app(client_id: str, client_secret: str) -> FastAPI:
    """Build a stub backend accepting a single client

    Args:
        client_id: Client id the token endpoint accepts
        client_secret: Matching client secret

    Returns:
        FastAPI application
    """
    app = FastAPI(title="Backend Stub", version="1.0.0")
    # access token -> token record, refresh token -> account id
    access_tokens: Dict[str, Dict[str, Any]] = {}
    refresh_tokens: Dict[str, Optional[str]] = {}

    @app.exception_handler(StubError)
    async def stub_error_handler(request: Request, exc: StubError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"errorCode": exc.error_code, "errorMessage": exc.detail},
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
        return response

    def require_token(request: Request) -> Dict[str, Any]:
        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or token not in access_tokens:
            raise StubError(401, "errors.com.epicgames.common.authorization.authorization_failed",
                            "Authorization failed: missing or unknown bearer token")
        return access_tokens[token]

    @app.post("/auth/token")
    async def issue_token(request: Request):
        if _basic_credentials(request.headers.get("authorization")) != (client_id, client_secret):
            raise StubError(401, "errors.com.epicgames.account.invalid_client", "Invalid client credentials")

        form = {key: values[0] for key, values in parse_qs((await request.body()).decode("utf-8")).items()}
        grant_type = form.get("grant_type")
        account_id: Optional[str] = None

        if grant_type == "client_credentials":
            pass
        elif grant_type == "password":
            if not form.get("username") or not form.get("password"):
                raise StubError(400, "errors.com.epicgames.common.oauth.invalid_request", "username and password are required")
            account_id = form["username"]
        elif grant_type == "exchange_code":
            if not form.get("exchange_code"):
                raise StubError(400, "errors.com.epicgames.common.oauth.invalid_request", "exchange_code is required")
            account_id = f"account-{form['exchange_code'][:8]}"
        elif grant_type == "refresh_token":
            if form.get("refresh_token") not in refresh_tokens:
                raise StubError(400, "errors.com.epicgames.account.auth_token.invalid_refresh_token",
                                "Refresh token is invalid or expired")
            account_id = refresh_tokens.pop(form["refresh_token"])
        else:
            raise StubError(400, "errors.com.epicgames.common.oauth.unsupported_grant_type",
                            f"Unsupported grant type: {grant_type}")

        access_token = secrets.token_hex(16)
        expires_at = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(seconds=TOKEN_LIFETIME)
        access_tokens[access_token] = {"client_id": client_id, "account_id": account_id}

        payload: Dict[str, Any] = {
            "access_token": access_token,
            "expires_in": TOKEN_LIFETIME,
            "expires_at": _iso(expires_at),
            "token_type": "bearer",
            "client_id": client_id,
            "internal_client": True,
            "client_service": CLIENT_SERVICE,
        }
        if account_id is not None:
            refresh_token = secrets.token_hex(16)
            refresh_tokens[refresh_token] = account_id
            payload["refresh_token"] = refresh_token
            payload["account_id"] = account_id

        logger.info(f"Issued {grant_type} token for client {client_id}")
        return payload

    @app.get("/lightswitch/api/service/bulk/status")
    async def bulk_status(token: Dict[str, Any] = Depends(require_token)):
        return [service_status("Fortnite")]

    @app.get("/lightswitch/api/service/{service_id}/status")
    async def single_status(service_id: str, token: Dict[str, Any] = Depends(require_token)):
        return service_status(service_id)

    @app.get("/fortnite/api/calendar/v1/timeline")
    async def calendar_timeline(token: Dict[str, Any] = Depends(require_token)):
        return timeline()

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "timestamp": time.time()}

    return app
