"""Value objects decoded from Alpaca API responses.

Fields declared here are validated (numbers sent as strings are coerced);
fields the API adds later are ignored.
"""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AlpacaModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    def __getitem__(self, key: str) -> Any:
        return getattr(self, key)


class Account(AlpacaModel):
    id: str
    account_number: str
    status: str
    currency: str = "USD"
    cash: float
    portfolio_value: Optional[float] = None
    equity: Optional[float] = None
    last_equity: Optional[float] = None
    buying_power: Optional[float] = None
    regt_buying_power: Optional[float] = None
    daytrading_buying_power: Optional[float] = None
    non_marginable_buying_power: Optional[float] = None
    long_market_value: Optional[float] = None
    short_market_value: Optional[float] = None
    initial_margin: Optional[float] = None
    maintenance_margin: Optional[float] = None
    multiplier: Optional[float] = None
    daytrade_count: Optional[int] = None
    pattern_day_trader: Optional[bool] = None
    trading_blocked: Optional[bool] = None
    transfers_blocked: Optional[bool] = None
    account_blocked: Optional[bool] = None
    trade_suspended_by_user: Optional[bool] = None
    shorting_enabled: Optional[bool] = None
    created_at: Optional[dt.datetime] = None


class Order(AlpacaModel):
    id: str
    client_order_id: str
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None
    submitted_at: Optional[dt.datetime] = None
    filled_at: Optional[dt.datetime] = None
    expired_at: Optional[dt.datetime] = None
    canceled_at: Optional[dt.datetime] = None
    failed_at: Optional[dt.datetime] = None
    replaced_at: Optional[dt.datetime] = None
    replaced_by: Optional[str] = None
    replaces: Optional[str] = None
    asset_id: Optional[str] = None
    symbol: Optional[str] = None
    asset_class: Optional[str] = None
    notional: Optional[float] = None
    qty: Optional[float] = None
    filled_qty: Optional[float] = None
    filled_avg_price: Optional[float] = None
    order_class: Optional[str] = None
    order_type: Optional[str] = None
    side: Optional[str] = None
    time_in_force: Optional[str] = None
    limit_price: Optional[float] = None
    stop_price: Optional[float] = None
    trail_price: Optional[float] = None
    trail_percent: Optional[float] = None
    hwm: Optional[float] = None
    status: str
    extended_hours: bool = False
    legs: Optional[list[dict[str, Any]]] = None


class CancelledOrder(AlpacaModel):
    """One entry of the multi-status response to "cancel all orders"."""

    id: str
    status: int
    body: Optional[dict[str, Any]] = None


class Position(AlpacaModel):
    asset_id: str
    symbol: str
    exchange: Optional[str] = None
    asset_class: Optional[str] = None
    avg_entry_price: float
    qty: float
    qty_available: Optional[float] = None
    side: str
    market_value: Optional[float] = None
    cost_basis: Optional[float] = None
    unrealized_pl: Optional[float] = None
    unrealized_plpc: Optional[float] = None
    unrealized_intraday_pl: Optional[float] = None
    unrealized_intraday_plpc: Optional[float] = None
    current_price: Optional[float] = None
    lastday_price: Optional[float] = None
    change_today: Optional[float] = None


class ClosedPosition(AlpacaModel):
    """One entry of the multi-status response to "close all positions"."""

    symbol: str
    status: int
    body: Optional[dict[str, Any]] = None


class Asset(AlpacaModel):
    id: str
    asset_class: str = Field(alias="class")
    exchange: str
    symbol: str
    name: Optional[str] = None
    status: str
    tradable: bool
    marginable: bool = False
    shortable: bool = False
    easy_to_borrow: bool = False
    fractionable: bool = False


class Watchlist(AlpacaModel):
    id: str
    account_id: str
    name: str
    created_at: dt.datetime
    updated_at: dt.datetime
    assets: list[Asset] = Field(default_factory=list)


class Calendar(AlpacaModel):
    date: dt.date
    open: str
    close: str
    session_open: Optional[str] = None
    session_close: Optional[str] = None
    settlement_date: Optional[dt.date] = None


class Clock(AlpacaModel):
    timestamp: dt.datetime
    is_open: bool
    next_open: dt.datetime
    next_close: dt.datetime


class AccountConfiguration(AlpacaModel):
    dtbp_check: Optional[str] = None
    trade_confirm_email: Optional[str] = None
    suspend_trade: Optional[bool] = None
    no_shorting: Optional[bool] = None
    fractional_trading: Optional[bool] = None
    max_margin_multiplier: Optional[str] = None
    pdt_check: Optional[str] = None


class AccountActivity(AlpacaModel):
    """Trade (FILL) and non-trade activities share this shape.

    Trade activities carry price/side/transaction_time; non-trade activities
    carry date/net_amount/per_share_amount.
    """

    id: str
    activity_type: str
    transaction_time: Optional[dt.datetime] = None
    type: Optional[str] = None
    price: Optional[float] = None
    qty: Optional[float] = None
    side: Optional[str] = None
    symbol: Optional[str] = None
    leaves_qty: Optional[float] = None
    cum_qty: Optional[float] = None
    order_id: Optional[str] = None
    order_status: Optional[str] = None
    date: Optional[dt.date] = None
    net_amount: Optional[float] = None
    per_share_amount: Optional[float] = None
    description: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_trade(self) -> bool:
        return self.activity_type == "FILL"


class PortfolioHistory(AlpacaModel):
    timestamp: list[int]
    equity: list[Optional[float]]
    profit_loss: list[Optional[float]]
    profit_loss_pct: list[Optional[float]]
    base_value: Optional[float] = None
    timeframe: str


class Trade(AlpacaModel):
    timestamp: dt.datetime = Field(alias="t")
    price: float = Field(alias="p")
    size: float = Field(alias="s")
    exchange: Optional[str] = Field(default=None, alias="x")
    id: Optional[int] = Field(default=None, alias="i")
    conditions: Optional[list[str]] = Field(default=None, alias="c")
    tape: Optional[str] = Field(default=None, alias="z")


class Quote(AlpacaModel):
    timestamp: dt.datetime = Field(alias="t")
    ask_exchange: Optional[str] = Field(default=None, alias="ax")
    ask_price: float = Field(alias="ap")
    ask_size: float = Field(alias="as")
    bid_exchange: Optional[str] = Field(default=None, alias="bx")
    bid_price: float = Field(alias="bp")
    bid_size: float = Field(alias="bs")
    conditions: Optional[list[str]] = Field(default=None, alias="c")
    tape: Optional[str] = Field(default=None, alias="z")


class Bar(AlpacaModel):
    timestamp: dt.datetime = Field(alias="t")
    open: float = Field(alias="o")
    high: float = Field(alias="h")
    low: float = Field(alias="l")
    close: float = Field(alias="c")
    volume: float = Field(alias="v")
    trade_count: Optional[float] = Field(default=None, alias="n")
    vwap: Optional[float] = Field(default=None, alias="vw")


class LatestTrade(AlpacaModel):
    symbol: str
    trade: Trade


class LatestQuote(AlpacaModel):
    symbol: str
    quote: Quote


class Snapshot(AlpacaModel):
    symbol: Optional[str] = None
    latest_trade: Optional[Trade] = Field(default=None, alias="latestTrade")
    latest_quote: Optional[Quote] = Field(default=None, alias="latestQuote")
    minute_bar: Optional[Bar] = Field(default=None, alias="minuteBar")
    daily_bar: Optional[Bar] = Field(default=None, alias="dailyBar")
    prev_daily_bar: Optional[Bar] = Field(default=None, alias="prevDailyBar")
