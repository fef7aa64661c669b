"""Market data endpoints: /v2/stocks/{symbol}/bars, trades, quotes, snapshot.

Served by the data host, which does not accept OAuth tokens.
"""

from datetime import datetime
from typing import Any, Optional, Union

import pandas as pd
from alpaca.data.enums import DataFeed
from alpaca.data.timeframe import TimeFrame
from pydantic import TypeAdapter

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import Bar, LatestQuote, LatestTrade, Snapshot
from alpaca_rest.rest.client import AlpacaClient

BAR_COLUMNS = ["open", "high", "low", "close", "volume", "trade_count", "vwap"]

_bars_adapter = TypeAdapter(list[Bar])


def bars_to_frame(payload: dict[str, Any]) -> pd.DataFrame:
    """Convert a bars response into a DataFrame indexed by bar timestamp.

    Returns:
        DataFrame with columns: open, high, low, close, volume, trade_count, vwap.
        `df.attrs["next_page_token"]` carries the pagination token.

    Raises:
        TypeError: If the payload is not a JSON object
    """
    if not isinstance(payload, dict):
        raise TypeError(f"Expected a bars object, got {type(payload).__name__}")
    bars = _bars_adapter.validate_python(payload.get("bars") or [])
    if bars:
        df = pd.DataFrame(
            [b.model_dump(include=set(BAR_COLUMNS)) for b in bars],
            index=pd.DatetimeIndex([b.timestamp for b in bars], name="timestamp"),
            columns=BAR_COLUMNS,
        )
    else:
        df = pd.DataFrame(columns=BAR_COLUMNS, index=pd.DatetimeIndex([], name="timestamp"))
    df.attrs["symbol"] = payload.get("symbol")
    df.attrs["next_page_token"] = payload.get("next_page_token")
    return df


class MarketDataEndpoint(AlpacaEndpoint):
    """Fetch market data: bars, latest trade/quote, snapshots."""

    def __init__(self, client: AlpacaClient, feed: Optional[DataFeed] = None) -> None:
        super().__init__(client, "stocks")
        self.feed = feed

    def get_bars(
        self,
        symbol: str,
        timeframe: Union[TimeFrame, str] = "1Min",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        adjustment: Optional[str] = None,
        feed: Optional[DataFeed] = None,
        page_token: Optional[str] = None,
    ) -> pd.DataFrame:
        """Fetch historical bars.

        Args:
            symbol: Stock symbol
            timeframe: TimeFrame or "1Min", "5Min", "15Min", "1Hour", "1Day", etc
            start: Start time (UTC)
            end: End time (UTC)
            limit: Max bars to return
            adjustment: "raw", "split", "dividend" or "all"
            feed: Overrides the configured data feed
            page_token: Token from a previous page's `df.attrs["next_page_token"]`
        """
        tf = timeframe.value if isinstance(timeframe, TimeFrame) else str(timeframe)
        return self.client.execute(
            "GET",
            self._path(symbol, "bars"),
            query_params={
                "timeframe": tf,
                "start": start,
                "end": end,
                "limit": limit,
                "adjustment": adjustment,
                "feed": feed or self.feed,
                "page_token": page_token,
            },
            expected_type=bars_to_frame,
        )

    def get_latest_trade(self, symbol: str, feed: Optional[DataFeed] = None) -> LatestTrade:
        return self.client.execute(
            "GET",
            self._path(symbol, "trades", "latest"),
            query_params={"feed": feed or self.feed},
            expected_type=LatestTrade,
        )

    def get_latest_quote(self, symbol: str, feed: Optional[DataFeed] = None) -> LatestQuote:
        return self.client.execute(
            "GET",
            self._path(symbol, "quotes", "latest"),
            query_params={"feed": feed or self.feed},
            expected_type=LatestQuote,
        )

    def get_snapshot(self, symbol: str, feed: Optional[DataFeed] = None) -> Snapshot:
        """Latest trade, latest quote, minute bar, daily and previous daily bar."""
        return self.client.execute(
            "GET",
            self._path(symbol, "snapshot"),
            query_params={"feed": feed or self.feed},
            expected_type=Snapshot,
        )
