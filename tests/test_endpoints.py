"""Tests for endpoint groups: paths, query parameters, bodies and decoding."""

import json
from datetime import date
from urllib.parse import parse_qsl, urlsplit

import pandas as pd
import pytest
from alpaca.data.enums import DataFeed

from alpaca_rest.api import AlpacaAPI
from alpaca_rest.endpoints.market_data import BAR_COLUMNS, bars_to_frame
from alpaca_rest.errors import DecodingError
from alpaca_rest.models import (
    AccountActivity,
    AccountConfiguration,
    Calendar,
    CancelledOrder,
    ClosedPosition,
    LatestTrade,
    Order,
    PortfolioHistory,
    Position,
    Snapshot,
    Watchlist,
)

POSITION_PAYLOAD = {
    "asset_id": "b0b6dd9d-8b9b-48a9-ba46-b9d54906e415",
    "symbol": "AAPL",
    "avg_entry_price": "150.25",
    "qty": "5",
    "side": "long",
    "market_value": "760.00",
}

WATCHLIST_PAYLOAD = {
    "id": "3174d6df-7726-44b4-a5bd-7fda5ae6e009",
    "account_id": "abe25343-a7ba-4255-bdeb-f7e013e9ee5d",
    "name": "tech",
    "created_at": "2024-01-02T15:00:00Z",
    "updated_at": "2024-01-02T15:00:00Z",
    "assets": [],
}

BARS_PAYLOAD = {
    "symbol": "AAPL",
    "next_page_token": "QUFQTHxNfDIwMjQ",
    "bars": [
        {"t": "2024-01-02T14:30:00Z", "o": 187.15, "h": 188.44, "l": 183.89, "c": 185.64, "v": 82488700, "n": 1009074, "vw": 185.9},
        {"t": "2024-01-03T14:30:00Z", "o": 184.22, "h": 185.88, "l": 183.43, "c": 184.25, "v": 58414460, "n": 656956, "vw": 184.6},
    ],
}


@pytest.fixture
def api(mock_session):
    return AlpacaAPI(key_id="AK", secret_key="SK", session=mock_session)


def sent(mock_session):
    """(method, host, path, query pairs, json body) of the last request."""
    args, kwargs = mock_session.request.call_args
    parts = urlsplit(args[1])
    body = json.loads(kwargs["data"]) if kwargs["data"] else None
    return args[0], parts.netloc, parts.path, parse_qsl(parts.query), body


class TestOrders:
    def test_market_order_body(self, api, mock_session, response_factory, order_payload):
        mock_session.request.return_value = response_factory(200, order_payload)

        order = api.orders().request_market_order("AAPL", 10, "buy")

        method, host, path, query, body = sent(mock_session)
        assert isinstance(order, Order)
        assert (method, host, path) == ("POST", "paper-api.alpaca.markets", "/v2/orders")
        assert body == {
            "symbol": "AAPL",
            "qty": 10,
            "side": "buy",
            "type": "market",
            "time_in_force": "day",
        }

    def test_bracket_order_body(self, api, mock_session, response_factory, order_payload):
        mock_session.request.return_value = response_factory(200, order_payload)

        api.orders().request_order(
            "AAPL",
            side="buy",
            order_type="limit",
            time_in_force="gtc",
            qty=1,
            limit_price=180.0,
            order_class="bracket",
            take_profit_limit_price=200.0,
            stop_loss_stop_price=170.0,
        )

        _, _, _, _, body = sent(mock_session)
        assert body["order_class"] == "bracket"
        assert body["take_profit"] == {"limit_price": 200.0}
        assert body["stop_loss"] == {"stop_price": 170.0}

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"order_type": "market"},
            {"order_type": "market", "qty": 1, "notional": 100},
            {"order_type": "limit", "qty": 1},
            {"order_type": "stop", "qty": 1},
            {"order_type": "trailing_stop", "qty": 1},
        ],
    )
    def test_invalid_orders_rejected_locally(self, api, mock_session, kwargs):
        with pytest.raises(ValueError):
            api.orders().request_order("AAPL", side="buy", time_in_force="day", **kwargs)

        mock_session.request.assert_not_called()

    def test_list_orders_query(self, api, mock_session, response_factory, order_payload):
        mock_session.request.return_value = response_factory(200, [order_payload])

        orders = api.orders().get(status="all", limit=50, symbols=["AAPL", "MSFT"])

        method, _, path, query, _ = sent(mock_session)
        assert len(orders) == 1
        assert (method, path) == ("GET", "/v2/orders")
        assert query == [("status", "all"), ("limit", "50"), ("symbols", "AAPL,MSFT")]

    def test_get_by_client_id(self, api, mock_session, response_factory, order_payload):
        mock_session.request.return_value = response_factory(200, order_payload)

        api.orders().get_by_client_id("my-id")

        _, _, path, query, _ = sent(mock_session)
        assert path == "/v2/orders:by_client_order_id"
        assert query == [("client_order_id", "my-id")]

    def test_replace_uses_patch(self, api, mock_session, response_factory, order_payload):
        mock_session.request.return_value = response_factory(200, order_payload)

        api.orders().replace("abc", qty=3, limit_price=181.5)

        method, _, path, _, body = sent(mock_session)
        assert (method, path) == ("PATCH", "/v2/orders/abc")
        assert body == {"qty": 3, "limit_price": 181.5}

    def test_cancel_all(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(207, [{"id": "abc", "status": 200}])

        cancelled = api.orders().cancel_all()

        assert cancelled == [CancelledOrder(id="abc", status=200)]
        assert sent(mock_session)[0] == "DELETE"

    def test_cancel_returns_none(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(204)

        assert api.orders().cancel("abc") is None
        assert sent(mock_session)[2] == "/v2/orders/abc"


class TestPositions:
    def test_get_positions(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, [POSITION_PAYLOAD])

        positions = api.positions().get()

        assert positions[0] == Position.model_validate(POSITION_PAYLOAD)
        assert positions[0].qty == 5.0

    def test_close_partial(self, api, mock_session, response_factory, order_payload):
        mock_session.request.return_value = response_factory(200, order_payload)

        api.positions().close("AAPL", percentage=50)

        method, _, path, query, _ = sent(mock_session)
        assert (method, path, query) == ("DELETE", "/v2/positions/AAPL", [("percentage", "50")])

    def test_close_rejects_qty_and_percentage(self, api):
        with pytest.raises(ValueError):
            api.positions().close("AAPL", qty=1, percentage=50)

    def test_close_all(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(207, [{"symbol": "AAPL", "status": 200}])

        closed = api.positions().close_all(cancel_orders=True)

        assert closed == [ClosedPosition(symbol="AAPL", status=200)]
        assert sent(mock_session)[3] == [("cancel_orders", "true")]


class TestWatchlist:
    def test_create(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, WATCHLIST_PAYLOAD)

        watchlist = api.watchlist().create("tech", symbols=["AAPL"])

        method, _, path, _, body = sent(mock_session)
        assert isinstance(watchlist, Watchlist)
        assert (method, path) == ("POST", "/v2/watchlists")
        assert body == {"name": "tech", "symbols": ["AAPL"]}

    def test_remove_symbol(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, WATCHLIST_PAYLOAD)

        api.watchlist().remove_symbol("wl1", "AAPL")

        assert sent(mock_session)[:3] == ("DELETE", "paper-api.alpaca.markets", "/v2/watchlists/wl1/AAPL")


class TestAccount:
    def test_calendar(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(
            200, [{"date": "2024-01-02", "open": "09:30", "close": "16:00"}]
        )

        days = api.calendar().get(start=date(2024, 1, 1), end=date(2024, 1, 5))

        assert days == [Calendar(date=date(2024, 1, 2), open="09:30", close="16:00")]
        assert sent(mock_session)[3] == [("start", "2024-01-01"), ("end", "2024-01-05")]

    def test_activities_single_type_in_path(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(
            200, [{"id": "20240102::1", "activity_type": "FILL", "price": "185.1", "side": "buy"}]
        )

        activities = api.account_activities().get(activity_types=["FILL"], page_size=10)

        _, _, path, query, _ = sent(mock_session)
        assert path == "/v2/account/activities/FILL"
        assert query == [("page_size", "10")]
        assert isinstance(activities[0], AccountActivity)
        assert activities[0].is_trade

    def test_activities_multiple_types_in_query(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, [])

        api.account_activities().get(activity_types=["DIV", "INT"])

        _, _, path, query, _ = sent(mock_session)
        assert path == "/v2/account/activities"
        assert query == [("activity_types", "DIV,INT")]

    def test_activities_date_exclusive(self, api):
        with pytest.raises(ValueError):
            api.account_activities().get(date=date(2024, 1, 2), after=date(2024, 1, 1))

    def test_portfolio_history(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(
            200,
            {
                "timestamp": [1704205800, 1704292200],
                "equity": [10000.0, 10100.5],
                "profit_loss": [0.0, 100.5],
                "profit_loss_pct": [0.0, 0.01005],
                "base_value": 10000.0,
                "timeframe": "1D",
            },
        )

        history = api.portfolio_history().get(period="1M", timeframe="1D")

        _, _, path, query, _ = sent(mock_session)
        assert isinstance(history, PortfolioHistory)
        assert history.equity[1] == 10100.5
        assert path == "/v2/account/portfolio/history"
        assert query == [("period", "1M"), ("timeframe", "1D")]

    def test_account_configuration_set(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, {"no_shorting": True})

        result = api.account_configuration().set(AccountConfiguration(no_shorting=True))

        method, _, path, _, body = sent(mock_session)
        assert (method, path) == ("PATCH", "/v2/account/configurations")
        assert body == {"no_shorting": True}
        assert result.no_shorting is True


class TestMarketData:
    def test_bars_frame(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, BARS_PAYLOAD)

        df = api.market_data().get_bars("AAPL", timeframe="1Day", limit=2)

        _, host, path, query, _ = sent(mock_session)
        assert host == "data.alpaca.markets"
        assert path == "/v2/stocks/AAPL/bars"
        assert query == [("timeframe", "1Day"), ("limit", "2"), ("feed", "iex")]
        assert list(df.columns) == BAR_COLUMNS
        assert len(df) == 2
        assert df.index.name == "timestamp"
        assert df["close"].iloc[-1] == 184.25
        assert df.attrs["next_page_token"] == "QUFQTHxNfDIwMjQ"

    def test_bars_frame_empty(self):
        df = bars_to_frame({"symbol": "AAPL", "bars": None, "next_page_token": None})

        assert df.empty
        assert list(df.columns) == BAR_COLUMNS
        assert isinstance(df.index, pd.DatetimeIndex)

    def test_latest_trade_feed_override(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(
            200,
            {"symbol": "AAPL", "trade": {"t": "2024-01-02T20:59:59Z", "p": 185.64, "s": 100, "x": "V"}},
        )

        trade = api.market_data().get_latest_trade("AAPL", feed=DataFeed.SIP)

        _, _, path, query, _ = sent(mock_session)
        assert isinstance(trade, LatestTrade)
        assert trade.trade.price == 185.64
        assert path == "/v2/stocks/AAPL/trades/latest"
        assert query == [("feed", "sip")]

    def test_snapshot(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(
            200,
            {
                "symbol": "AAPL",
                "latestTrade": {"t": "2024-01-02T20:59:59Z", "p": 185.64, "s": 100},
                "dailyBar": {"t": "2024-01-02T05:00:00Z", "o": 187.15, "h": 188.44, "l": 183.89, "c": 185.64, "v": 82488700},
            },
        )

        snapshot = api.market_data().get_snapshot("AAPL")

        assert isinstance(snapshot, Snapshot)
        assert snapshot.daily_bar.close == 185.64
        assert snapshot.latest_quote is None

    def test_data_requests_use_key_pair_headers(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, BARS_PAYLOAD)

        api.market_data().get_bars("AAPL")

        headers = mock_session.request.call_args.kwargs["headers"]
        assert headers["APCA-API-KEY-ID"] == "AK"
        assert "Authorization" not in headers


class TestReference:
    def test_account(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(
            200,
            {
                "id": "904837e3-3b76-47ec-b432-046db621571b",
                "account_number": "PA1234",
                "status": "ACTIVE",
                "cash": "10000.50",
                "buying_power": "20001.00",
                "crypto_status": "ACTIVE",
            },
        )

        account = api.account().get()

        assert account.cash == 10000.5
        assert account.buying_power == 20001.0
        assert sent(mock_session)[2] == "/v2/account"

    def test_clock(self, api, mock_session, response_factory, clock_payload):
        mock_session.request.return_value = response_factory(200, clock_payload)

        clock = api.clock().get()

        assert clock.is_open is True
        assert sent(mock_session)[2] == "/v2/clock"

    def test_assets_query(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, [])

        assert api.assets().get(status="active", asset_class="us_equity") == []
        assert sent(mock_session)[3] == [("status", "active"), ("asset_class", "us_equity")]


class TestPathEncoding:
    def test_crypto_symbol_is_one_segment(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(
            200, dict(POSITION_PAYLOAD, symbol="BTC/USD")
        )

        position = api.positions().get_by_symbol("BTC/USD")

        assert position.symbol == "BTC/USD"
        assert mock_session.request.call_args.args[1] == "https://paper-api.alpaca.markets/v2/positions/BTC%2FUSD"

    def test_watchlist_remove_crypto_symbol(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, WATCHLIST_PAYLOAD)

        api.watchlist().remove_symbol("wl1", "BTC/USD")

        assert mock_session.request.call_args.args[1].endswith("/v2/watchlists/wl1/BTC%2FUSD")


class TestWrongShape:
    def test_bars_array_body(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, [1, 2, 3])

        with pytest.raises(DecodingError) as exc_info:
            api.market_data().get_bars("AAPL")

        assert exc_info.value.status_code == 200

    def test_bars_entries_missing_fields(self, api, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, {"bars": [{"t": "2024-01-02T14:30:00Z"}]})

        with pytest.raises(DecodingError):
            api.market_data().get_bars("AAPL")
