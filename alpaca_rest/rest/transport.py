"""Transport executor: one HTTP exchange per attempt, retried per RetryPolicy.

The executor owns no cross-call state. Each `execute` builds its own
RetryState; the requests.Session connection pool is the only shared resource.
"""

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from alpaca_rest.errors import CancelledError, TransportError, TransportErrorKind
from alpaca_rest.rest.request import Request
from alpaca_rest.rest.retry import (
    RATE_LIMITED,
    RetryPolicy,
    RetryState,
    backoff_delay,
    retry_after_hint,
)

logger = logging.getLogger(__name__)


class CancellationToken:
    """Caller-owned cancel signal, safe to set from any thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Block up to `timeout` seconds; True if cancelled meanwhile."""
        return self._event.wait(timeout)


@dataclass
class ExecutionOutcome:
    """Final response of a call plus how many attempts it took."""

    response: requests.Response
    attempts: int


class TransportExecutor:
    """Send requests with retry/backoff on transient failures.

    Transient: connection errors (including bodies cut off mid-transfer),
    timeouts and statuses in `policy.retry_statuses` (429 plus common 5xx by
    default). Other responses are returned to the caller on the first
    attempt; other requests failures raise TransportError without retrying.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        policy: Optional[RetryPolicy] = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        sleep: Optional[Callable[[float], None]] = None,
        rand: Callable[[], float] = random.random,
    ) -> None:
        """Initialise executor.

        Args:
            session: Shared HTTP session (a new one is created and owned if None)
            policy: Retry limits (defaults to RetryPolicy())
            clock: Monotonic clock used for elapsed time and deadlines
            wall_clock: Epoch clock used to interpret rate-limit reset headers
            sleep: Backoff sleep override (tests); default waits on the cancel token
            rand: Jitter source in [0, 1)
        """
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.policy = policy or RetryPolicy()
        self._clock = clock
        self._wall_clock = wall_clock
        self._sleep = sleep
        self._rand = rand

    def now(self) -> float:
        return self._clock()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def execute(
        self,
        request: Request,
        cancel_token: Optional[CancellationToken] = None,
        deadline: Optional[float] = None,
    ) -> ExecutionOutcome:
        """Execute `request`, retrying transient failures.

        Args:
            request: Built request
            cancel_token: Optional caller cancel signal
            deadline: Optional absolute deadline on this executor's clock

        Returns:
            ExecutionOutcome with the final (non-transient or exhausted 5xx) response

        Raises:
            TransportError: Connection/timeout/rate-limit failures after the retry budget
            CancelledError: Cancelled by token or deadline
        """
        policy = self.policy
        state = RetryState(started_at=self._clock())

        while True:
            self._check_cancelled(state, cancel_token, deadline)
            state.attempts += 1
            start = self._clock()
            response: Optional[requests.Response] = None
            error: Optional[Exception] = None
            hint: Optional[float] = None

            try:
                response = self.session.request(
                    request.method,
                    request.url,
                    headers=dict(request.headers),
                    data=request.body,
                    timeout=self._attempt_timeout(deadline),
                )
            except requests.Timeout as e:
                if deadline is not None and self._clock() >= deadline:
                    raise CancelledError(
                        f"{request.method} {request.path} deadline exceeded",
                        attempts=state.attempts,
                    ) from e
                error = e
                state.last_error_kind = TransportErrorKind.TIMEOUT
                state.last_status = None
            except (requests.ConnectionError, requests.exceptions.ChunkedEncodingError) as e:
                # ChunkedEncodingError: connection dropped mid-body
                error = e
                state.last_error_kind = TransportErrorKind.CONNECTION_FAILED
                state.last_status = None
            except requests.RequestException as e:
                logger.error(
                    "http_request method=%s path=%s attempt=%d outcome=failed exception=%s",
                    request.method,
                    request.path,
                    state.attempts,
                    e,
                )
                raise TransportError(
                    TransportErrorKind.CONNECTION_FAILED,
                    attempts=state.attempts,
                    message=str(e),
                ) from e

            duration_ms = int((self._clock() - start) * 1000)

            if response is not None:
                if cancel_token is not None and cancel_token.cancelled:
                    response.close()
                    raise CancelledError(
                        f"{request.method} {request.path} cancelled", attempts=state.attempts
                    )
                status = response.status_code
                state.last_status = status
                if not policy.is_retryable_status(status):
                    logger.info(
                        "http_request method=%s path=%s attempt=%d status=%d duration_ms=%d outcome=done",
                        request.method,
                        request.path,
                        state.attempts,
                        status,
                        duration_ms,
                    )
                    return ExecutionOutcome(response=response, attempts=state.attempts)

                if status == RATE_LIMITED:
                    state.last_error_kind = TransportErrorKind.RATE_LIMIT_EXCEEDED
                    hint = retry_after_hint(response.headers, self._wall_clock())
                else:
                    state.last_error_kind = None
                logger.warning(
                    "http_request method=%s path=%s attempt=%d status=%d duration_ms=%d outcome=transient",
                    request.method,
                    request.path,
                    state.attempts,
                    status,
                    duration_ms,
                )
            else:
                logger.warning(
                    "http_request method=%s path=%s attempt=%d duration_ms=%d outcome=%s exception=%s",
                    request.method,
                    request.path,
                    state.attempts,
                    duration_ms,
                    state.last_error_kind.value if state.last_error_kind else "error",
                    error,
                )

            if state.attempts >= policy.max_attempts:
                return self._exhausted(request, state, response, error)

            delay = hint if hint is not None else backoff_delay(policy, state.attempts, self._rand)
            if state.elapsed(self._clock()) + delay > policy.max_elapsed:
                return self._exhausted(request, state, response, error)

            if response is not None:
                response.close()
            self._wait(request, state, delay, cancel_token, deadline)

    def _attempt_timeout(self, deadline: Optional[float]) -> float:
        timeout = self.policy.request_timeout
        if deadline is not None:
            timeout = min(timeout, max(deadline - self._clock(), 0.001))
        return timeout

    def _check_cancelled(
        self,
        state: RetryState,
        cancel_token: Optional[CancellationToken],
        deadline: Optional[float],
    ) -> None:
        if cancel_token is not None and cancel_token.cancelled:
            raise CancelledError("request cancelled", attempts=state.attempts)
        if deadline is not None and self._clock() >= deadline:
            raise CancelledError("request deadline exceeded", attempts=state.attempts)

    def _wait(
        self,
        request: Request,
        state: RetryState,
        delay: float,
        cancel_token: Optional[CancellationToken],
        deadline: Optional[float],
    ) -> None:
        if deadline is not None and self._clock() + delay >= deadline:
            raise CancelledError(
                f"{request.method} {request.path} deadline exceeded before retry",
                attempts=state.attempts,
            )
        state.delays.append(delay)
        logger.debug(
            "http_retry method=%s path=%s attempt=%d delay_s=%.3f",
            request.method,
            request.path,
            state.attempts,
            delay,
        )
        if self._sleep is not None:
            self._sleep(delay)
        elif cancel_token is not None:
            if cancel_token.wait(delay):
                raise CancelledError(
                    f"{request.method} {request.path} cancelled during backoff",
                    attempts=state.attempts,
                )
        elif delay > 0:
            time.sleep(delay)

    def _exhausted(
        self,
        request: Request,
        state: RetryState,
        response: Optional[requests.Response],
        error: Optional[Exception],
    ) -> ExecutionOutcome:
        logger.error(
            "http_request method=%s path=%s attempts=%d outcome=exhausted last_status=%s",
            request.method,
            request.path,
            state.attempts,
            state.last_status,
        )
        if response is not None:
            if response.status_code == RATE_LIMITED:
                response.close()
                raise TransportError(
                    TransportErrorKind.RATE_LIMIT_EXCEEDED,
                    attempts=state.attempts,
                    last_status=RATE_LIMITED,
                )
            # Exhausted 5xx responses are decoded as API errors
            return ExecutionOutcome(response=response, attempts=state.attempts)

        kind = state.last_error_kind or TransportErrorKind.CONNECTION_FAILED
        raise TransportError(
            kind,
            attempts=state.attempts,
            last_status=state.last_status,
            message=str(error) if error else "",
        ) from error
