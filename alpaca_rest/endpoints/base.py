"""Base class for endpoint groups."""

from typing import Optional
from urllib.parse import quote

from alpaca_rest.errors import DataClientUnavailableError
from alpaca_rest.rest.client import AlpacaClient


class AlpacaEndpoint:
    """A group of related operations sharing one injected client.

    Attributes:
        client: AlpacaClient every call of this group goes through
        endpoint_path_segment: First path segment below the version, e.g. "orders"
    """

    def __init__(self, client: Optional[AlpacaClient], endpoint_path_segment: str) -> None:
        if client is None:
            raise DataClientUnavailableError(
                f"No client available for '{endpoint_path_segment}' endpoints"
            )
        self.client = client
        self.endpoint_path_segment = endpoint_path_segment

    def _path(self, *segments: str) -> str:
        """Join segments below the group path; each is percent-encoded (BTC/USD -> BTC%2FUSD)."""
        return "/".join((self.endpoint_path_segment,) + tuple(quote(str(s), safe="") for s in segments))
