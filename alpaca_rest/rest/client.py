"""AlpacaClient: the single call surface shared by every endpoint group."""

import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

import requests

from alpaca_rest.config import ClientConfig
from alpaca_rest.rest.decoder import ResponseDecoder
from alpaca_rest.rest.request import ClientTarget, QueryParams, build_request
from alpaca_rest.rest.retry import RetryPolicy
from alpaca_rest.rest.transport import CancellationToken, TransportExecutor

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TypedResult(Generic[T]):
    """Decoded payload of a successful call."""

    value: T
    attempts: int
    status_code: int


class AlpacaClient:
    """Long-lived client bound to one host and one auth mode.

    Holds only immutable configuration plus the shared executor; every call
    builds its own Request, retry state and Response, so one instance can be
    used from many threads at once.
    """

    def __init__(
        self,
        config: ClientConfig,
        executor: Optional[TransportExecutor] = None,
        decoder: Optional[ResponseDecoder] = None,
        target: ClientTarget = ClientTarget.BROKER,
        retry_policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.target = target
        self.executor = executor or TransportExecutor(session=session, policy=retry_policy)
        self.decoder = decoder or ResponseDecoder()

    def __repr__(self) -> str:
        return f"AlpacaClient(base_url={self.config.base_url!r}, target={self.target.value!r})"

    def call(
        self,
        method: str,
        path: str,
        query_params: Optional[QueryParams] = None,
        body: Any = None,
        expected_type: Any = None,
        cancel_token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None,
    ) -> TypedResult[Any]:
        """Build, execute and decode one logical API call.

        Args:
            method: HTTP method
            path: Path relative to the version segment
            query_params: Query parameters; None values are dropped
            body: JSON body payload
            expected_type: Decode target (see ResponseDecoder)
            cancel_token: Optional caller cancel signal
            timeout: Optional overall deadline for the call (seconds)

        Returns:
            TypedResult with the decoded value and the attempt count

        Raises:
            TransportError, DecodingError, APIError, CancelledError
        """
        request = build_request(
            self.config,
            method,
            path,
            query_params=query_params,
            body=body,
            target=self.target,
        )
        deadline = None
        if timeout is not None:
            deadline = self.executor.now() + timeout

        outcome = self.executor.execute(request, cancel_token=cancel_token, deadline=deadline)
        response = outcome.response
        try:
            value = self.decoder.decode(response, expected_type)
        finally:
            response.close()
        return TypedResult(value=value, attempts=outcome.attempts, status_code=response.status_code)

    def execute(
        self,
        method: str,
        path: str,
        query_params: Optional[QueryParams] = None,
        body: Any = None,
        expected_type: Any = None,
        cancel_token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Same as `call` but returns only the decoded value."""
        return self.call(
            method,
            path,
            query_params=query_params,
            body=body,
            expected_type=expected_type,
            cancel_token=cancel_token,
            timeout=timeout,
        ).value

    def close(self) -> None:
        self.executor.close()

    def __enter__(self) -> "AlpacaClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
