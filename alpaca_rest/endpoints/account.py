"""Account endpoint: /v2/account."""

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import Account
from alpaca_rest.rest.client import AlpacaClient


class AccountEndpoint(AlpacaEndpoint):
    """Fetch account info (equity, buying_power, etc)."""

    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "account")

    def get(self) -> Account:
        return self.client.execute("GET", self._path(), expected_type=Account)
