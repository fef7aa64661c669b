"""Asset reference endpoint: /v2/assets."""

from typing import Optional, Union

from alpaca.trading.enums import AssetClass, AssetStatus

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import Asset
from alpaca_rest.rest.client import AlpacaClient


class AssetsEndpoint(AlpacaEndpoint):
    """Fetch asset data."""

    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "assets")

    def get(
        self,
        status: Optional[Union[AssetStatus, str]] = None,
        asset_class: Optional[Union[AssetClass, str]] = None,
    ) -> list[Asset]:
        """Fetch all assets matching criteria.

        Args:
            status: "active" or "inactive"
            asset_class: "us_equity", "crypto", etc
        """
        return self.client.execute(
            "GET",
            self._path(),
            query_params={"status": status, "asset_class": asset_class},
            expected_type=list[Asset],
        )

    def get_by_symbol(self, symbol_or_asset_id: str) -> Asset:
        return self.client.execute("GET", self._path(symbol_or_asset_id), expected_type=Asset)
