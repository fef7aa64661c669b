"""Request construction: versioned URL, query string, JSON body, auth headers."""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode, urlsplit

from alpaca_rest.config import ClientConfig

ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

QueryParams = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


class ClientTarget(str, Enum):
    BROKER = "broker"
    DATA = "data"


@dataclass(frozen=True)
class Request:
    """A fully built HTTP request. Never mutated after construction."""

    method: str
    url: str
    path: str
    params: tuple[tuple[str, str], ...] = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    target: ClientTarget = ClientTarget.BROKER

    def __repr__(self) -> str:
        # Headers carry credentials
        return f"Request(method={self.method!r}, url={self.url!r}, target={self.target.value!r})"


def format_query_value(value: Any) -> str:
    """Render a query value the way the Alpaca API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(format_query_value(v) for v in value)
    return str(value)


def encode_query(query_params: Optional[QueryParams]) -> tuple[tuple[str, str], ...]:
    """Drop absent and empty values and stringify the rest, keeping caller order."""
    if not query_params:
        return ()
    items = query_params.items() if isinstance(query_params, Mapping) else query_params
    encoded = ((str(name), format_query_value(value)) for name, value in items if value is not None)
    # Empty collections and strings are never sent as "name="
    return tuple((name, text) for name, text in encoded if text != "")


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_body(body: Any) -> Optional[str]:
    if body is None:
        return None
    if isinstance(body, Mapping):
        body = {k: v for k, v in body.items() if v is not None}
    return json.dumps(body, default=_json_default)


def build_request(
    config: ClientConfig,
    method: str,
    relative_path: str,
    query_params: Optional[QueryParams] = None,
    body: Any = None,
    target: ClientTarget = ClientTarget.BROKER,
) -> Request:
    """Build a request against `config`'s host and version.

    Args:
        config: Client configuration (auth + host routing)
        method: HTTP method
        relative_path: Path below the version segment, e.g. "orders/abc"
        query_params: Mapping or ordered pairs; None values are omitted
        body: JSON-serializable payload, or None

    Returns:
        Immutable Request with exactly one auth scheme applied

    Raises:
        ValueError: If the method is not a supported HTTP method
    """
    method = method.upper()
    if method not in ALLOWED_METHODS:
        raise ValueError(f"Unsupported HTTP method: {method}")

    path = relative_path.strip("/")
    params = encode_query(query_params)
    url = f"{config.base_url}/{path}"
    if params:
        url = f"{url}?{urlencode(params)}"

    headers = {"Accept": "application/json"}
    headers.update(config.auth.headers())
    payload = serialize_body(body)
    if payload is not None:
        headers["Content-Type"] = "application/json"

    return Request(
        method=method,
        url=url,
        path=path,
        params=params,
        headers=headers,
        body=payload,
        target=target,
    )


def parse_request(request: Request) -> tuple[str, str, tuple[tuple[str, str], ...]]:
    """Recover (method, relative path, query pairs) from a built request's URL."""
    parts = urlsplit(request.url)
    segments = parts.path.lstrip("/").split("/", 1)
    relative_path = segments[1] if len(segments) > 1 else ""
    params = tuple(parse_qsl(parts.query, keep_blank_values=True))
    return request.method, relative_path, params
