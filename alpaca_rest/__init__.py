"""Alpaca REST client: broker and market data APIs behind one facade."""

from alpaca_rest.api import AlpacaAPI
from alpaca_rest.config import (
    ClientConfig,
    DataAPIType,
    EndpointAPIType,
    KeyPairAuth,
    OAuthAuth,
    resolve_client_configs,
)
from alpaca_rest.errors import (
    AlpacaError,
    APIError,
    CancelledError,
    ConfigurationError,
    DataClientUnavailableError,
    DecodingError,
    TransportError,
    TransportErrorKind,
    UnclassifiedAPIError,
)
from alpaca_rest.rest.async_client import AsyncAlpacaClient
from alpaca_rest.rest.client import AlpacaClient, TypedResult
from alpaca_rest.rest.retry import RetryPolicy
from alpaca_rest.rest.transport import CancellationToken

__all__ = [
    "APIError",
    "AlpacaAPI",
    "AlpacaClient",
    "AlpacaError",
    "AsyncAlpacaClient",
    "CancellationToken",
    "CancelledError",
    "ClientConfig",
    "ConfigurationError",
    "DataAPIType",
    "DataClientUnavailableError",
    "DecodingError",
    "EndpointAPIType",
    "KeyPairAuth",
    "OAuthAuth",
    "RetryPolicy",
    "TransportError",
    "TransportErrorKind",
    "TypedResult",
    "UnclassifiedAPIError",
    "resolve_client_configs",
]
