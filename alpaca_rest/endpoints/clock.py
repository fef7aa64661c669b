"""Clock endpoint: /v2/clock.

The clock is the authoritative source for whether the market is open.
Call it fresh; nothing here caches.
"""

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import Clock
from alpaca_rest.rest.client import AlpacaClient


class ClockEndpoint(AlpacaEndpoint):
    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "clock")

    def get(self) -> Clock:
        """Get market clock: is_open, next_open, next_close, timestamp."""
        return self.client.execute("GET", self._path(), expected_type=Clock)
