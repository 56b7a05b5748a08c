"""Validated run arguments"""

from typing import Dict, Optional

from pydantic import BaseModel, Field, model_validator

import settings
from auth import GrantType, InvalidParameters, build_grant


class RunArgs(BaseModel):
    """Everything a harness run needs, validated before any network call

    Mirrors the token endpoint rules: the chosen grant type decides which of
    the optional credentials are required.
    """
    grant_type: GrantType = GrantType.EXCHANGE_CODE
    base_url: str = settings.BASE_URL
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)
    exchange_code: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    refresh_token: Optional[str] = None
    tests_dir: str = settings.TESTS_DIR
    auth_timeout: float = Field(default=settings.AUTH_TIMEOUT, gt=0)
    request_timeout: float = Field(default=settings.REQUEST_TIMEOUT, gt=0)

    @model_validator(mode="after")
    def check_grant_params(self) -> "RunArgs":
        try:
            build_grant(self.grant_type, self.grant_params())
        except InvalidParameters as e:
            raise ValueError(str(e)) from e
        return self

    def grant_params(self) -> Dict[str, str]:
        """Grant-specific parameters that were supplied"""
        candidates = {
            "exchange_code": self.exchange_code,
            "username": self.username,
            "password": self.password,
            "refresh_token": self.refresh_token,
        }
        return {name: value for name, value in candidates.items() if value}
