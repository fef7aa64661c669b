"""AlpacaAPI: one object exposing every endpoint group.

You will generally only need one instance per set of credentials. It owns two
long-lived clients, created once here and injected into every endpoint group:

- broker client: account, orders, positions, assets, watchlists, calendar,
  clock, account configuration, account activities, portfolio history
- data client: market data; absent under OAuth, which the data API rejects
"""

import logging
from typing import Any, Optional, Union

import requests
from alpaca.data.enums import DataFeed

from alpaca_rest.config import (
    EndpointAPIType,
    coerce_data_api_type,
    load_env,
    load_retry_policy,
    parse_data_api_type,
    parse_endpoint_api_type,
    resolve_client_configs,
)
from alpaca_rest.endpoints import (
    AccountActivitiesEndpoint,
    AccountConfigurationEndpoint,
    AccountEndpoint,
    AssetsEndpoint,
    CalendarEndpoint,
    ClockEndpoint,
    MarketDataEndpoint,
    OrdersEndpoint,
    PortfolioHistoryEndpoint,
    PositionsEndpoint,
    WatchlistEndpoint,
)
from alpaca_rest.errors import DataClientUnavailableError
from alpaca_rest.rest.client import AlpacaClient
from alpaca_rest.rest.request import ClientTarget
from alpaca_rest.rest.retry import RetryPolicy
from alpaca_rest.rest.transport import TransportExecutor

logger = logging.getLogger(__name__)


class AlpacaAPI:
    def __init__(
        self,
        key_id: Optional[str] = None,
        secret_key: Optional[str] = None,
        oauth_token: Optional[str] = None,
        endpoint_api_type: Optional[EndpointAPIType] = EndpointAPIType.PAPER,
        data_api_type: Optional[Union[DataFeed, str]] = DataFeed.IEX,
        retry_policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API.

        Args:
            key_id: API key ID (with secret_key; exclusive with oauth_token)
            secret_key: API secret key
            oauth_token: OAuth token. The data API does not work with OAuth tokens.
            endpoint_api_type: LIVE or PAPER broker host
            data_api_type: Default market data feed
            retry_policy: Retry limits shared by both clients
            session: Shared requests.Session (one is created and owned if None)

        Raises:
            ConfigurationError: If the credential/endpoint combination is invalid
        """
        feed = coerce_data_api_type(data_api_type) if data_api_type is not None else None
        broker_config, data_config = resolve_client_configs(
            key_id, secret_key, oauth_token, endpoint_api_type, feed
        )

        self._executor = TransportExecutor(session=session, policy=retry_policy)
        self._broker_client = AlpacaClient(
            broker_config, executor=self._executor, target=ClientTarget.BROKER
        )
        self._data_client: Optional[AlpacaClient] = None
        if data_config is not None:
            self._data_client = AlpacaClient(
                data_config, executor=self._executor, target=ClientTarget.DATA
            )

        # Ordering below follows the Alpaca documentation
        self._account = AccountEndpoint(self._broker_client)
        self._market_data: Optional[MarketDataEndpoint] = None
        if self._data_client is not None:
            self._market_data = MarketDataEndpoint(self._data_client, feed=feed)
        self._orders = OrdersEndpoint(self._broker_client)
        self._positions = PositionsEndpoint(self._broker_client)
        self._assets = AssetsEndpoint(self._broker_client)
        self._watchlist = WatchlistEndpoint(self._broker_client)
        self._calendar = CalendarEndpoint(self._broker_client)
        self._clock = ClockEndpoint(self._broker_client)
        self._account_configuration = AccountConfigurationEndpoint(self._broker_client)
        self._account_activities = AccountActivitiesEndpoint(self._broker_client)
        self._portfolio_history = PortfolioHistoryEndpoint(self._broker_client)

        logger.info(
            "alpaca_api broker_url=%s data_url=%s auth=%s",
            broker_config.base_url,
            data_config.base_url if data_config else None,
            "oauth" if broker_config.is_oauth else "key_pair",
        )

    @classmethod
    def from_env(cls, session: Optional[requests.Session] = None) -> "AlpacaAPI":
        """Build from ALPACA_* environment variables (and a .env file).

        RETRY_CONFIG_PATH, when set, points at a YAML file with a `retry:` section.
        """
        env = load_env()
        retry_policy = None
        if env.get("RETRY_CONFIG_PATH"):
            retry_policy = load_retry_policy(env["RETRY_CONFIG_PATH"])
        return cls(
            key_id=env.get("ALPACA_API_KEY") or None,
            secret_key=env.get("ALPACA_SECRET_KEY") or None,
            oauth_token=env.get("ALPACA_OAUTH_TOKEN") or None,
            endpoint_api_type=parse_endpoint_api_type(env.get("ALPACA_ENDPOINT_API_TYPE", "paper")),
            data_api_type=parse_data_api_type(env.get("ALPACA_DATA_API_TYPE", "iex")),
            retry_policy=retry_policy,
            session=session,
        )

    def account(self) -> AccountEndpoint:
        return self._account

    def market_data(self) -> Optional[MarketDataEndpoint]:
        """Market data endpoints, or None when authenticated with OAuth."""
        return self._market_data

    def orders(self) -> OrdersEndpoint:
        return self._orders

    def positions(self) -> PositionsEndpoint:
        return self._positions

    def assets(self) -> AssetsEndpoint:
        return self._assets

    def watchlist(self) -> WatchlistEndpoint:
        return self._watchlist

    def calendar(self) -> CalendarEndpoint:
        return self._calendar

    def clock(self) -> ClockEndpoint:
        return self._clock

    def account_configuration(self) -> AccountConfigurationEndpoint:
        return self._account_configuration

    def account_activities(self) -> AccountActivitiesEndpoint:
        return self._account_activities

    def portfolio_history(self) -> PortfolioHistoryEndpoint:
        return self._portfolio_history

    @property
    def broker_client(self) -> AlpacaClient:
        return self._broker_client

    @property
    def data_client(self) -> Optional[AlpacaClient]:
        return self._data_client

    def require_data_client(self) -> AlpacaClient:
        """Return the data client or fail fast without touching the network.

        Raises:
            DataClientUnavailableError: Under OAuth authentication
        """
        if self._data_client is None:
            raise DataClientUnavailableError(
                "Market data is unavailable with OAuth authentication; use a key ID/secret key pair"
            )
        return self._data_client

    def close(self) -> None:
        """Release the HTTP session if this instance created it."""
        self._executor.close()

    def __enter__(self) -> "AlpacaAPI":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
