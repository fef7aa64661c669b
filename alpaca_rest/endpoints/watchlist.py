"""Watchlist endpoint: /v2/watchlists."""

from typing import Optional

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import Watchlist
from alpaca_rest.rest.client import AlpacaClient


class WatchlistEndpoint(AlpacaEndpoint):
    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "watchlists")

    def get(self) -> list[Watchlist]:
        """List watchlists. Entries in the listing carry no assets."""
        return self.client.execute("GET", self._path(), expected_type=list[Watchlist])

    def get_by_id(self, watchlist_id: str) -> Watchlist:
        return self.client.execute("GET", self._path(watchlist_id), expected_type=Watchlist)

    def create(self, name: str, symbols: Optional[list[str]] = None) -> Watchlist:
        return self.client.execute(
            "POST",
            self._path(),
            body={"name": name, "symbols": symbols},
            expected_type=Watchlist,
        )

    def update(
        self,
        watchlist_id: str,
        name: Optional[str] = None,
        symbols: Optional[list[str]] = None,
    ) -> Watchlist:
        """Replace a watchlist's name and/or its full symbol list."""
        return self.client.execute(
            "PUT",
            self._path(watchlist_id),
            body={"name": name, "symbols": symbols},
            expected_type=Watchlist,
        )

    def add_asset(self, watchlist_id: str, symbol: str) -> Watchlist:
        return self.client.execute(
            "POST",
            self._path(watchlist_id),
            body={"symbol": symbol},
            expected_type=Watchlist,
        )

    def remove_symbol(self, watchlist_id: str, symbol: str) -> Watchlist:
        return self.client.execute(
            "DELETE", self._path(watchlist_id, symbol), expected_type=Watchlist
        )

    def delete(self, watchlist_id: str) -> None:
        self.client.execute("DELETE", self._path(watchlist_id))
