"""Async wrapper around AlpacaClient.

Runs blocking calls on a single bounded ThreadPoolExecutor so the event loop
stays responsive. Cancelling the awaiting task sets the call's
CancellationToken, which aborts any pending backoff sleep in the worker.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Optional

from alpaca_rest.rest.client import AlpacaClient, TypedResult
from alpaca_rest.rest.request import QueryParams
from alpaca_rest.rest.transport import CancellationToken

logger = logging.getLogger(__name__)


class AsyncAlpacaClient:
    def __init__(self, client: AlpacaClient, max_workers: int = 8) -> None:
        self._client = client
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(max_workers=max_workers)

    @property
    def client(self) -> AlpacaClient:
        return self._client

    async def call(
        self,
        method: str,
        path: str,
        query_params: Optional[QueryParams] = None,
        body: Any = None,
        expected_type: Any = None,
        cancel_token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None,
    ) -> TypedResult[Any]:
        if self._executor is None:
            raise RuntimeError("AsyncAlpacaClient is closed")

        token = cancel_token or CancellationToken()
        func = partial(
            self._client.call,
            method,
            path,
            query_params=query_params,
            body=body,
            expected_type=expected_type,
            cancel_token=token,
            timeout=timeout,
        )
        loop = asyncio.get_running_loop()
        fut = loop.run_in_executor(self._executor, func)
        try:
            return await fut
        except asyncio.CancelledError:
            # Stop the worker at its next checkpoint
            token.cancel()
            logger.info("http_call method=%s path=%s outcome=cancelled", method, path)
            raise

    async def execute(
        self,
        method: str,
        path: str,
        query_params: Optional[QueryParams] = None,
        body: Any = None,
        expected_type: Any = None,
        cancel_token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        result = await self.call(
            method,
            path,
            query_params=query_params,
            body=body,
            expected_type=expected_type,
            cancel_token=cancel_token,
            timeout=timeout,
        )
        return result.value

    async def close(self) -> None:
        """Shutdown the threadpool. Safe to call multiple times."""
        exec_ref = self._executor
        if exec_ref is None:
            return
        self._executor = None
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, exec_ref.shutdown, True)

    async def __aenter__(self) -> AsyncAlpacaClient:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc: Optional[BaseException],
        tb: Optional[Any],
    ) -> None:
        await self.close()
