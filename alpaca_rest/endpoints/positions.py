"""Positions endpoint: /v2/positions."""

from typing import Optional

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import ClosedPosition, Order, Position
from alpaca_rest.rest.client import AlpacaClient


class PositionsEndpoint(AlpacaEndpoint):
    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "positions")

    def get(self) -> list[Position]:
        """Get all open positions."""
        return self.client.execute("GET", self._path(), expected_type=list[Position])

    def get_by_symbol(self, symbol_or_asset_id: str) -> Position:
        return self.client.execute(
            "GET", self._path(symbol_or_asset_id), expected_type=Position
        )

    def close_all(self, cancel_orders: Optional[bool] = None) -> list[ClosedPosition]:
        """Liquidate every open position.

        Args:
            cancel_orders: Also cancel all open orders first

        Returns:
            One status entry per position (HTTP 207 multi-status)
        """
        return self.client.execute(
            "DELETE",
            self._path(),
            query_params={"cancel_orders": cancel_orders},
            expected_type=list[ClosedPosition],
        )

    def close(
        self,
        symbol_or_asset_id: str,
        qty: Optional[float] = None,
        percentage: Optional[float] = None,
    ) -> Order:
        """Liquidate one position, fully or partially.

        Args:
            symbol_or_asset_id: Position to close
            qty: Shares to liquidate
            percentage: Percent of the position to liquidate (0-100)

        Returns:
            The liquidating order

        Raises:
            ValueError: If both qty and percentage are given
        """
        if qty is not None and percentage is not None:
            raise ValueError("qty and percentage are mutually exclusive")
        return self.client.execute(
            "DELETE",
            self._path(symbol_or_asset_id),
            query_params={"qty": qty, "percentage": percentage},
            expected_type=Order,
        )
