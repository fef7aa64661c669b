"""Portfolio history endpoint: /v2/account/portfolio/history."""

from datetime import date
from typing import Optional

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import PortfolioHistory
from alpaca_rest.rest.client import AlpacaClient


class PortfolioHistoryEndpoint(AlpacaEndpoint):
    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "account")

    def get(
        self,
        period: Optional[str] = None,
        timeframe: Optional[str] = None,
        date_end: Optional[date] = None,
        extended_hours: Optional[bool] = None,
    ) -> PortfolioHistory:
        """Fetch equity and P/L time series.

        Args:
            period: "<number><unit>" with unit D, W, M or A, e.g. "1M"
            timeframe: "1Min", "5Min", "15Min", "1H" or "1D"
            date_end: Last date of the series
            extended_hours: Include extended hours (intraday timeframes only)
        """
        return self.client.execute(
            "GET",
            self._path("portfolio", "history"),
            query_params={
                "period": period,
                "timeframe": timeframe,
                "date_end": date_end,
                "extended_hours": extended_hours,
            },
            expected_type=PortfolioHistory,
        )
