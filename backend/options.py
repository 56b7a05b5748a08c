"""Per-request test options"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class BodyType(str, Enum):
    JSON = "json"
    FORM = "form"
    FORM_DATA = "formData"
    TEXT = "text"


# Methods that carry a request body
BODY_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH})


@dataclass(frozen=True)
class TestOptions:
    """Configuration for a single test request

    Attributes:
        endpoint: Path appended to the engine base URL
        method: HTTP method
        body_type: How ``body`` is encoded
        body: Payload; only sent for POST, PUT and PATCH
        headers: Extra headers, overriding the engine defaults
        query_params: Query parameters, kept in insertion order
        bearer_auth: Attach ``Authorization: Bearer <token>``
        timeout: Seconds before the exchange is aborted (engine default if None)
    """
    __test__ = False

    endpoint: str
    method: Union[HttpMethod, str] = HttpMethod.GET
    body_type: Union[BodyType, str] = BodyType.JSON
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)
    bearer_auth: bool = False
    timeout: Optional[float] = None

    def __post_init__(self):
        method = self.method if isinstance(self.method, HttpMethod) else HttpMethod(self.method.upper())
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "body_type", BodyType(self.body_type))
        object.__setattr__(self, "headers", dict(self.headers))
        object.__setattr__(self, "query_params", dict(self.query_params))

    @property
    def sends_body(self) -> bool:
        return self.body is not None and self.method in BODY_METHODS
