"""Account activities endpoint: /v2/account/activities."""

from datetime import date, datetime
from typing import Optional, Union

from alpaca_rest.endpoints.base import AlpacaEndpoint
from alpaca_rest.models import AccountActivity
from alpaca_rest.rest.client import AlpacaClient


class AccountActivitiesEndpoint(AlpacaEndpoint):
    def __init__(self, client: AlpacaClient) -> None:
        super().__init__(client, "account")

    def get(
        self,
        activity_types: Optional[list[str]] = None,
        date: Optional[date] = None,
        until: Optional[Union[datetime, date]] = None,
        after: Optional[Union[datetime, date]] = None,
        direction: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> list[AccountActivity]:
        """Fetch account activities, newest first by default.

        Args:
            activity_types: e.g. ["FILL"], ["DIV", "INT"]; all types when None
            date: Only activities on this date (exclusive with until/after)
            until: Only activities before this time
            after: Only activities after this time
            direction: "asc" or "desc"
            page_size: Max entries per page (API max 100)
            page_token: ID of the last activity from the previous page

        Raises:
            ValueError: If date is combined with until or after
        """
        if date is not None and (until is not None or after is not None):
            raise ValueError("date cannot be combined with until/after")

        query = {
            "date": date,
            "until": until,
            "after": after,
            "direction": direction,
            "page_size": page_size,
            "page_token": page_token,
        }
        if activity_types and len(activity_types) == 1:
            path = self._path("activities", activity_types[0])
        else:
            path = self._path("activities")
            query = {"activity_types": activity_types or None, **query}

        return self.client.execute(
            "GET", path, query_params=query, expected_type=list[AccountActivity]
        )
