"""URL, header and body assembly for test requests"""

import json
import os
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from .options import BodyType

DEFAULT_CONTENT_TYPES = {
    BodyType.JSON: "application/json",
    BodyType.FORM: "application/x-www-form-urlencoded",
    BodyType.TEXT: "text/plain",
}


def stringify(value: Any) -> str:
    """Render a scalar the way it appears on the wire

    Booleans become ``true``/``false`` and None becomes an empty string.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def build_url(base_url: str, endpoint: str) -> str:
    """Join base URL and endpoint

    Query parameters are left to httpx (``params=``), which keeps insertion
    order and merges them with any query already in the endpoint.
    """
    if endpoint and not endpoint.startswith("/"):
        endpoint = f"/{endpoint}"
    return f"{base_url.rstrip('/')}{endpoint}"


def build_headers(
    default_headers: Mapping[str, str],
    headers: Mapping[str, str],
    *,
    body_type: BodyType,
    sends_body: bool,
    token: Optional[str] = None,
    bearer_auth: bool = False,
) -> httpx.Headers:
    """Layer default headers, per-call headers and the bearer token

    Later layers win on (case-insensitive) name collisions. Multipart bodies
    never carry a preset Content-Type since the boundary belongs to the body.
    """
    merged = httpx.Headers(default_headers)
    for name, value in headers.items():
        merged[name] = value

    if bearer_auth and token:
        merged["Authorization"] = f"Bearer {token}"

    if body_type is BodyType.FORM_DATA:
        if "content-type" in merged:
            del merged["content-type"]
    elif sends_body and "content-type" not in merged:
        merged["Content-Type"] = DEFAULT_CONTENT_TYPES[body_type]

    return merged


def _form_data_part(key: str, value: Any) -> Tuple[str, Any]:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return key, (key, bytes(value), "application/octet-stream")
    if isinstance(value, tuple):
        return key, value
    if hasattr(value, "read"):
        filename = os.path.basename(str(getattr(value, "name", key)))
        return key, (filename, value)
    return key, (None, stringify(value).encode("utf-8"))


def encode_body(body_type: BodyType, body: Any) -> Dict[str, Any]:
    """Encode a payload into httpx request keyword arguments

    Args:
        body_type: Encoding to use
        body: Payload to encode

    Returns:
        ``{"content": ...}`` for json and text bodies, ``{"data": {...}}``
        for url-encoded forms or ``{"files": [...]}`` for multipart bodies
    """
    if body_type is BodyType.JSON:
        return {"content": json.dumps(body)}

    if body_type is BodyType.FORM:
        if not isinstance(body, Mapping):
            raise TypeError(f"form bodies must be a mapping, got {type(body).__name__}")
        return {"data": dict(body)}

    if body_type is BodyType.FORM_DATA:
        if not isinstance(body, Mapping):
            raise TypeError(f"formData bodies must be a mapping, got {type(body).__name__}")
        parts: List[Tuple[str, Any]] = []
        for key, value in body.items():
            values = value if isinstance(value, list) else [value]
            parts.extend(_form_data_part(key, item) for item in values)
        return {"files": parts}

    return {"content": stringify(body)}
