"""Exception taxonomy for the Alpaca REST client.

Every failure surfaced to callers derives from `AlpacaError`:

- ConfigurationError: bad construction inputs, raised before any request
- TransportError: network/timeout/rate-limit failures that outlived retries
- DecodingError: a 2xx body that does not match the expected shape
- APIError: an error reported by the Alpaca service (never retried)
- CancelledError: the caller aborted the call (token or deadline)
"""

from enum import Enum
from typing import Any, Optional


class AlpacaError(Exception):
    """Base class for all client errors."""

    pass


class ConfigurationError(AlpacaError):
    """Raised when client construction inputs are invalid."""

    pass


class DataClientUnavailableError(ConfigurationError):
    """Raised when market data is requested from an OAuth-authenticated API."""

    pass


class TransportErrorKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION_FAILED = "connection_failed"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"


class TransportError(AlpacaError):
    """Raised when a transient failure persists after the retry budget."""

    def __init__(
        self,
        kind: TransportErrorKind,
        attempts: int,
        last_status: Optional[int] = None,
        message: str = "",
    ) -> None:
        self.kind = kind
        self.attempts = attempts
        self.last_status = last_status
        detail = f": {message}" if message else ""
        super().__init__(
            f"{kind.value} after {attempts} attempt(s)"
            f" (last_status={last_status}){detail}"
        )


class DecodingError(AlpacaError):
    """Raised when a successful response cannot be decoded."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class APIError(AlpacaError):
    """Structured error reported by the Alpaca API, e.g. a rejected order."""

    def __init__(
        self,
        status_code: int,
        code: Optional[int],
        message: str,
        retry_after: Optional[float] = None,
        body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.retry_after = retry_after
        self.body = body
        super().__init__(f"HTTP {status_code} (code={code}): {message}")


class UnclassifiedAPIError(APIError):
    """Non-2xx response whose body does not follow the API error schema."""

    def __init__(self, status_code: int, body: str, retry_after: Optional[float] = None) -> None:
        snippet = body[:200] if body else "<empty body>"
        super().__init__(
            status_code=status_code,
            code=None,
            message=snippet,
            retry_after=retry_after,
            body=body,
        )


class CancelledError(AlpacaError):
    """Raised when the caller cancels a call or its deadline passes."""

    def __init__(self, message: str = "request cancelled", attempts: int = 0) -> None:
        self.attempts = attempts
        super().__init__(message)
