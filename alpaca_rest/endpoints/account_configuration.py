"""Account configuration endpoint: /v2/account/configurations."""

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import AccountConfiguration
from alpaca_rest.rest.client import AlpacaClient


class AccountConfigurationEndpoint(AlpacaEndpoint):
    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "account")

    def get(self) -> AccountConfiguration:
        return self.client.execute(
            "GET", self._path("configurations"), expected_type=AccountConfiguration
        )

    def set(self, configuration: AccountConfiguration) -> AccountConfiguration:
        """Update settings; fields left as None are not sent."""
        return self.client.execute(
            "PATCH",
            self._path("configurations"),
            body=configuration.model_dump(mode="json", exclude_none=True),
            expected_type=AccountConfiguration,
        )
