"""Shared test fixtures."""

import json
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from alpaca_rest.config import ClientConfig, KeyPairAuth, OAuthAuth
from alpaca_rest.rest.client import AlpacaClient
from alpaca_rest.rest.retry import RetryPolicy
from alpaca_rest.rest.transport import TransportExecutor

CLOCK_PAYLOAD = {
    "timestamp": "2024-01-02T10:00:00-05:00",
    "is_open": True,
    "next_open": "2024-01-03T09:30:00-05:00",
    "next_close": "2024-01-02T16:00:00-05:00",
}

ORDER_PAYLOAD = {
    "id": "61e69015-8549-4bfd-b9c3-01e75843f47d",
    "client_order_id": "eb9e2aaa-f71a-4f51-b5b4-52a6c565dad4",
    "created_at": "2024-01-02T15:00:00Z",
    "symbol": "AAPL",
    "qty": "10",
    "filled_qty": "0",
    "order_type": "market",
    "side": "buy",
    "time_in_force": "day",
    "status": "accepted",
    "extended_hours": False,
}


def make_response(status_code=200, json_body=None, headers=None, content=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if content is None:
        content = b"" if json_body is None else json.dumps(json_body).encode()
    response._content = content
    response._content_consumed = True
    response.headers = CaseInsensitiveDict(headers or {})
    response.encoding = "utf-8"
    return response


class FakeClock:
    """Monotonic clock that only moves when something sleeps on it."""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_session():
    """HTTP session double; tests set `request.side_effect` / `return_value`."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def key_pair_config():
    return ClientConfig(auth=KeyPairAuth(key_id="AKTEST", secret_key="sk_test"), host_subdomain="paper-api")


@pytest.fixture
def oauth_config():
    return ClientConfig(auth=OAuthAuth(token="oauth_tok"), host_subdomain="paper-api")


@pytest.fixture
def make_executor(mock_session, fake_clock):
    """Executor on the fake clock with jitter disabled."""

    def _make(policy=None, sleep=True, wall_clock=None):
        return TransportExecutor(
            session=mock_session,
            policy=policy or RetryPolicy(),
            clock=fake_clock,
            wall_clock=wall_clock or (lambda: 1_700_000_000.0),
            sleep=fake_clock.sleep if sleep else None,
            rand=lambda: 0.0,
        )

    return _make


@pytest.fixture
def broker_client(key_pair_config, make_executor):
    return AlpacaClient(key_pair_config, executor=make_executor())


@pytest.fixture
def clock_payload():
    return dict(CLOCK_PAYLOAD)


@pytest.fixture
def order_payload():
    return dict(ORDER_PAYLOAD)
