"""Calendar endpoint: /v2/calendar (market holidays and early closes)."""

from datetime import date
from typing import Optional

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import Calendar
from alpaca_rest.rest.client import AlpacaClient


class CalendarEndpoint(AlpacaEndpoint):
    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "calendar")

    def get(self, start: Optional[date] = None, end: Optional[date] = None) -> list[Calendar]:
        """Fetch market calendar for a date range.

        Args:
            start: First date (inclusive); API default when None
            end: Last date (inclusive); API default when None

        Returns:
            Calendar days with open/close times in America/New_York
        """
        return self.client.execute(
            "GET",
            self._path(),
            query_params={"start": start, "end": end},
            expected_type=list[Calendar],
        )
