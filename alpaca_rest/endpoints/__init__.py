"""Endpoint groups. Each wraps an injected AlpacaClient."""

from alpaca_rest.endpoints.account import AccountEndpoint
from alpaca_rest.endpoints.account_activities import AccountActivitiesEndpoint
from alpaca_rest.endpoints.account_configuration import AccountConfigurationEndpoint
from alpaca_rest.endpoints.assets import AssetsEndpoint
from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.endpoints.calendar import CalendarEndpoint
from alpaca_rest.endpoints.clock import ClockEndpoint
from alpaca_rest.endpoints.market_data import MarketDataEndpoint
from alpaca_rest.endpoints.orders import OrdersEndpoint
from alpaca_rest.endpoints.portfolio_history import PortfolioHistoryEndpoint
from alpaca_rest.endpoints.positions import PositionsEndpoint
from alpaca_rest.endpoints.watchlist import WatchlistEndpoint

__all__ = [
    "AccountActivitiesEndpoint",
    "AccountConfigurationEndpoint",
    "AccountEndpoint",
    "AlpacaEndpoint",
    "AssetsEndpoint",
    "CalendarEndpoint",
    "ClockEndpoint",
    "MarketDataEndpoint",
    "OrdersEndpoint",
    "PortfolioHistoryEndpoint",
    "PositionsEndpoint",
    "WatchlistEndpoint",
]
