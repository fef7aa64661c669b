"""Response decoding: status mapping and typed payload validation."""

import json
import logging
import time
from functools import lru_cache
from typing import Any, Callable, Optional, get_origin

import requests
from pydantic import TypeAdapter, ValidationError

from alpaca_rest.errors import APIError, DecodingError, UnclassifiedAPIError
from alpaca_rest.rest.retry import retry_after_hint

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _adapter(expected_type: Any) -> TypeAdapter:
    return TypeAdapter(expected_type)


def _is_type_expression(expected_type: Any) -> bool:
    return isinstance(expected_type, type) or get_origin(expected_type) is not None


class ResponseDecoder:
    """Turn a raw response into a typed value or raise a typed error.

    `expected_type` may be:
    - None: the body is ignored (e.g. 204 No Content)
    - a type or generic alias (`Order`, `list[Order]`, `dict[str, Any]`):
      validated with pydantic; unknown fields are ignored
    - any other callable: applied to the parsed JSON (e.g. a DataFrame builder);
      whatever it raises is reported as DecodingError
    """

    def decode(self, response: requests.Response, expected_type: Any = None) -> Any:
        """Decode `response` into `expected_type`.

        Raises:
            DecodingError: 2xx body is empty, not JSON, or the wrong shape
            APIError: Non-2xx response following the API error schema
            UnclassifiedAPIError: Any other non-2xx response
        """
        status = response.status_code
        if not 200 <= status < 300:
            raise self.to_api_error(response)

        if expected_type is None:
            return None

        body = response.content or b""
        if not body.strip():
            raise DecodingError(
                f"Empty body for HTTP {status}, expected {_type_name(expected_type)}",
                status_code=status,
            )

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise DecodingError(
                f"Response body is not valid JSON: {e}",
                status_code=status,
                body=_text(response),
            ) from e

        return self.decode_payload(payload, expected_type, status_code=status)

    def decode_payload(
        self,
        payload: Any,
        expected_type: Any,
        status_code: Optional[int] = None,
    ) -> Any:
        if expected_type is Any:
            return payload

        if _is_type_expression(expected_type):
            try:
                return _adapter(expected_type).validate_python(payload)
            except ValidationError as e:
                raise DecodingError(
                    f"Response does not match {_type_name(expected_type)}: {e}",
                    status_code=status_code,
                ) from e

        converter: Callable[[Any], Any] = expected_type
        try:
            return converter(payload)
        except Exception as e:
            raise DecodingError(
                f"Failed to convert response with {_type_name(expected_type)}: {e}",
                status_code=status_code,
            ) from e

    def to_api_error(self, response: requests.Response) -> APIError:
        status = response.status_code
        text = _text(response)
        retry_after = retry_after_hint(response.headers, time.time())

        try:
            body = json.loads(text) if text else None
        except ValueError:
            body = None

        if isinstance(body, dict) and "code" in body and isinstance(body.get("message"), str):
            try:
                code: Optional[int] = int(body["code"])
            except (TypeError, ValueError):
                code = None
            if code is not None:
                logger.debug("api_error status=%d code=%d", status, code)
                return APIError(
                    status_code=status,
                    code=code,
                    message=body["message"],
                    retry_after=retry_after,
                    body=body,
                )

        return UnclassifiedAPIError(status_code=status, body=text, retry_after=retry_after)


def _text(response: requests.Response) -> str:
    content = response.content or b""
    return content.decode("utf-8", errors="replace")


def _type_name(expected_type: Any) -> str:
    return getattr(expected_type, "__name__", None) or repr(expected_type)
