"""Retry policy and per-call retry state with exponential backoff.

Protects against transient API failures by:
1. Classifying failures (connection errors, timeouts, 429, configured 5xx)
2. Applying capped exponential backoff (base * 2^n) with jitter
3. Honouring server-supplied retry-after hints on 429
"""

import random
from dataclasses import dataclass, field
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Mapping, Optional

from alpaca_rest.errors import TransportErrorKind

DEFAULT_RETRY_STATUSES: tuple[int, ...] = (429, 500, 502, 503, 504)
RATE_LIMITED = 429


@dataclass(frozen=True)
class RetryPolicy:
    """Retry limits shared by every call of a client.

    Attributes:
        max_attempts: Total attempts per call, including the first
        base_delay: Initial backoff delay (seconds)
        max_delay: Maximum single backoff delay (seconds)
        max_elapsed: Give up rather than sleep past this many seconds
        request_timeout: Per-attempt connect/read timeout (seconds)
        jitter: Fraction of the delay that is randomised away
        retry_statuses: HTTP statuses treated as transient
    """

    max_attempts: int = 5
    base_delay: float = 0.5
    max_delay: float = 16.0
    max_elapsed: float = 60.0
    request_timeout: float = 10.0
    jitter: float = 0.5
    retry_statuses: tuple[int, ...] = DEFAULT_RETRY_STATUSES

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.retry_statuses


@dataclass
class RetryState:
    """Mutable bookkeeping owned by a single logical call."""

    started_at: float
    attempts: int = 0
    last_error_kind: Optional[TransportErrorKind] = None
    last_status: Optional[int] = None
    delays: list[float] = field(default_factory=list)

    def elapsed(self, now: float) -> float:
        return now - self.started_at


def backoff_delay(
    policy: RetryPolicy,
    attempt: int,
    rand: Callable[[], float] = random.random,
) -> float:
    """Calculate the delay before retrying after `attempt` failed attempts.

    Returns:
        Seconds to wait; 0 when nothing has failed yet
    """
    if attempt <= 0:
        return 0.0

    # Exponential: 2^n, capped at max_delay
    delay = min(policy.base_delay * (2 ** (attempt - 1)), policy.max_delay)
    # jitter
    return delay * (1.0 - policy.jitter * rand())


def retry_after_hint(headers: Mapping[str, str], now_epoch: float) -> Optional[float]:
    """Extract the server's retry-after hint in seconds, if any.

    `Retry-After` may be delta-seconds or an HTTP date. Alpaca also sends
    `X-RateLimit-Reset` as a unix timestamp.
    """
    retry_after = headers.get("Retry-After")
    if retry_after:
        value = retry_after.strip()
        try:
            return max(0.0, float(value))
        except ValueError:
            pass
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            when = None
        if when is not None:
            if when.tzinfo is None:
                when = when.replace(tzinfo=timezone.utc)
            return max(0.0, when.timestamp() - now_epoch)

    reset = headers.get("X-RateLimit-Reset")
    if reset:
        try:
            return max(0.0, float(reset) - now_epoch)
        except ValueError:
            return None
    return None

