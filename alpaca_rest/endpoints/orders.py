"""Orders endpoint: /v2/orders (submit, replace, cancel, get)."""

from datetime import datetime
from typing import Optional, Union

from alpaca.trading.enums import OrderClass, OrderSide, OrderType, QueryOrderStatus, TimeInForce

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import CancelledOrder, Order
from alpaca_rest.rest.client import AlpacaClient


class OrdersEndpoint(AlpacaEndpoint):
    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "orders")

    def get(
        self,
        status: Optional[Union[QueryOrderStatus, str]] = None,
        limit: Optional[int] = None,
        after: Optional[datetime] = None,
        until: Optional[datetime] = None,
        direction: Optional[str] = None,
        nested: Optional[bool] = None,
        symbols: Optional[list[str]] = None,
    ) -> list[Order]:
        """List orders.

        Args:
            status: "open", "closed" or "all" (API default: open)
            limit: Max orders to return (API max 500)
            after: Only orders submitted after this time
            until: Only orders submitted until this time
            direction: "asc" or "desc" by submission time
            nested: Roll up multi-leg orders under their parent's `legs`
            symbols: Only orders for these symbols
        """
        return self.client.execute(
            "GET",
            self._path(),
            query_params={
                "status": status,
                "limit": limit,
                "after": after,
                "until": until,
                "direction": direction,
                "nested": nested,
                "symbols": symbols,
            },
            expected_type=list[Order],
        )

    def get_by_id(self, order_id: str, nested: Optional[bool] = None) -> Order:
        return self.client.execute(
            "GET",
            self._path(order_id),
            query_params={"nested": nested},
            expected_type=Order,
        )

    def get_by_client_id(self, client_order_id: str) -> Order:
        return self.client.execute(
            "GET",
            "orders:by_client_order_id",
            query_params={"client_order_id": client_order_id},
            expected_type=Order,
        )

    def request_order(
        self,
        symbol: str,
        side: Union[OrderSide, str],
        order_type: Union[OrderType, str],
        time_in_force: Union[TimeInForce, str],
        qty: Optional[float] = None,
        notional: Optional[float] = None,
        limit_price: Optional[float] = None,
        stop_price: Optional[float] = None,
        trail_price: Optional[float] = None,
        trail_percent: Optional[float] = None,
        extended_hours: Optional[bool] = None,
        client_order_id: Optional[str] = None,
        order_class: Optional[Union[OrderClass, str]] = None,
        take_profit_limit_price: Optional[float] = None,
        stop_loss_stop_price: Optional[float] = None,
        stop_loss_limit_price: Optional[float] = None,
    ) -> Order:
        """Submit an order.

        Args:
            symbol: Symbol or asset ID
            side: "buy" or "sell"
            order_type: "market", "limit", "stop", "stop_limit" or "trailing_stop"
            time_in_force: "day", "gtc", "opg", "cls", "ioc" or "fok"
            qty: Share quantity (exclusive with notional)
            notional: Dollar amount (exclusive with qty)
            limit_price: Required for limit and stop_limit orders
            stop_price: Required for stop and stop_limit orders
            trail_price: Trailing stop distance in dollars
            trail_percent: Trailing stop distance in percent
            extended_hours: Eligible for pre/post market (limit + day only)
            client_order_id: Caller-chosen unique ID (max 48 chars)
            order_class: "simple", "bracket", "oco" or "oto"
            take_profit_limit_price: Bracket take-profit leg limit price
            stop_loss_stop_price: Bracket stop-loss leg stop price
            stop_loss_limit_price: Bracket stop-loss leg limit price

        Raises:
            ValueError: If the parameter combination can never be accepted
        """
        order_type = OrderType(order_type)
        if (qty is None) == (notional is None):
            raise ValueError("Exactly one of qty or notional is required")
        if order_type in (OrderType.LIMIT, OrderType.STOP_LIMIT) and limit_price is None:
            raise ValueError(f"limit_price required for {order_type.value} orders")
        if order_type in (OrderType.STOP, OrderType.STOP_LIMIT) and stop_price is None:
            raise ValueError(f"stop_price required for {order_type.value} orders")
        if order_type == OrderType.TRAILING_STOP and (trail_price is None) == (trail_percent is None):
            raise ValueError("Exactly one of trail_price or trail_percent is required")

        take_profit = None
        if take_profit_limit_price is not None:
            take_profit = {"limit_price": take_profit_limit_price}
        stop_loss = None
        if stop_loss_stop_price is not None or stop_loss_limit_price is not None:
            stop_loss = {
                k: v
                for k, v in (
                    ("stop_price", stop_loss_stop_price),
                    ("limit_price", stop_loss_limit_price),
                )
                if v is not None
            }

        body = {
            "symbol": symbol,
            "qty": qty,
            "notional": notional,
            "side": OrderSide(side),
            "type": order_type,
            "time_in_force": TimeInForce(time_in_force),
            "limit_price": limit_price,
            "stop_price": stop_price,
            "trail_price": trail_price,
            "trail_percent": trail_percent,
            "extended_hours": extended_hours,
            "client_order_id": client_order_id,
            "order_class": OrderClass(order_class) if order_class is not None else None,
            "take_profit": take_profit,
            "stop_loss": stop_loss,
        }
        return self.client.execute("POST", self._path(), body=body, expected_type=Order)

    def request_market_order(
        self,
        symbol: str,
        qty: float,
        side: Union[OrderSide, str],
        time_in_force: Union[TimeInForce, str] = TimeInForce.DAY,
        client_order_id: Optional[str] = None,
    ) -> Order:
        return self.request_order(
            symbol=symbol,
            side=side,
            order_type=OrderType.MARKET,
            time_in_force=time_in_force,
            qty=qty,
            client_order_id=client_order_id,
        )

    def request_limit_order(
        self,
        symbol: str,
        qty: float,
        side: Union[OrderSide, str],
        limit_price: float,
        time_in_force: Union[TimeInForce, str] = TimeInForce.DAY,
        extended_hours: Optional[bool] = None,
        client_order_id: Optional[str] = None,
    ) -> Order:
        return self.request_order(
            symbol=symbol,
            side=side,
            order_type=OrderType.LIMIT,
            time_in_force=time_in_force,
            qty=qty,
            limit_price=limit_price,
            extended_hours=extended_hours,
            client_order_id=client_order_id,
        )

    def replace(
        self,
        order_id: str,
        qty: Optional[float] = None,
        time_in_force: Optional[Union[TimeInForce, str]] = None,
        limit_price: Optional[float] = None,
        stop_price: Optional[float] = None,
        trail: Optional[float] = None,
        client_order_id: Optional[str] = None,
    ) -> Order:
        """Replace an open order; returns the new order."""
        body = {
            "qty": qty,
            "time_in_force": TimeInForce(time_in_force) if time_in_force is not None else None,
            "limit_price": limit_price,
            "stop_price": stop_price,
            "trail": trail,
            "client_order_id": client_order_id,
        }
        return self.client.execute("PATCH", self._path(order_id), body=body, expected_type=Order)

    def cancel_all(self) -> list[CancelledOrder]:
        """Cancel all open orders; one status entry per order (HTTP 207)."""
        return self.client.execute("DELETE", self._path(), expected_type=list[CancelledOrder])

    def cancel(self, order_id: str) -> None:
        self.client.execute("DELETE", self._path(order_id))
