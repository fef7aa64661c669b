#!/usr/bin/env python3
"""Print current trading status from the Alpaca API as JSON.

Usage:
    python tools/get_trading_status.py

Credentials come from ALPACA_* environment variables or a .env file
(see alpaca_rest.config.load_env). Returns JSON with:
    - clock: market open/closed and next session times
    - account: equity, cash, buying power
    - positions / position_count
    - open_orders / open_order_count
"""

import json
import sys
from datetime import datetime, timezone

from alpaca.trading.enums import QueryOrderStatus

from alpaca_rest import AlpacaAPI, AlpacaError
from alpaca_rest.logger import setup_logger


def get_trading_status(api: AlpacaAPI) -> dict:
    """Collect clock, account, positions and open orders."""
    clock = api.clock().get()
    account = api.account().get()
    positions = api.positions().get()
    open_orders = api.orders().get(status=QueryOrderStatus.OPEN)

    position_list = [
        {
            "symbol": pos.symbol,
            "qty": pos.qty,
            "side": pos.side,
            "avg_entry_price": pos.avg_entry_price,
            "current_price": pos.current_price or 0.0,
            "unrealized_pl": pos.unrealized_pl or 0.0,
        }
        for pos in positions
    ]
    order_list = [
        {
            "id": order.id,
            "symbol": order.symbol,
            "side": order.side,
            "qty": order.qty or 0,
            "filled_qty": order.filled_qty or 0,
            "status": order.status,
        }
        for order in open_orders
    ]

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "clock": {
            "is_open": clock.is_open,
            "next_open": clock.next_open.isoformat(),
            "next_close": clock.next_close.isoformat(),
        },
        "account": {
            "equity": account.equity,
            "cash": account.cash,
            "buying_power": account.buying_power,
        },
        "positions": position_list,
        "position_count": len(position_list),
        "open_orders": order_list,
        "open_order_count": len(order_list),
    }


def main():
    """Main entry point."""
    # stdout carries the JSON report
    setup_logger(log_level="ERROR")
    try:
        with AlpacaAPI.from_env() as api:
            status = get_trading_status(api)
        print(json.dumps(status, indent=2))
        return 0
    except AlpacaError as e:
        error_output = {
            "error": str(e),
            "error_type": type(e).__name__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        print(json.dumps(error_output, indent=2))
        return 1


if __name__ == "__main__":
    sys.exit(main())
