"""GraphQL request builder: one HTTP POST per API operation."""

import json
import logging
from typing import Any

import httpx

from lnr.console import spinner
from lnr.errors import ApiError, TransportError
from lnr.settings import Config

logger = logging.getLogger(__name__)

ENDPOINT = "https://api.linear.app/graphql"
TIMEOUT = 30


class Gql:
    """A query document plus its variables.

    Setters return the builder so a request reads as one chain::

        Gql(config, token, documents.TEAM_STATES).put_string("id", team.id).run()
    """

    def __init__(self, config: Config, token: str, document: str) -> None:
        self.config = config
        self._token = token
        self.document = document
        self.variables: dict[str, Any] = {}

    def put_string(self, key: str, value: str) -> "Gql":
        self.variables[key] = value
        return self

    def put_integer(self, key: str, value: int) -> "Gql":
        self.variables[key] = int(value)
        return self

    def maybe_put_string(self, key: str, value: str | None) -> "Gql":
        # Absent and null are different to some mutations, so None means no key at all
        if value is not None:
            self.variables[key] = value
        return self

    def put_object(self, key: str, value: dict[str, Any]) -> "Gql":
        self.variables[key] = value
        return self

    @property
    def url(self) -> str:
        return self.config.mock_url or ENDPOINT

    def body(self) -> dict[str, Any]:
        return {"query": self.document, "variables": self.variables}

    def run(self) -> str:
        """POST the request and return the raw response text."""
        body = self.body()
        logger.debug("POST %s variables=%s", self.url, sorted(self.variables))

        with spinner(self.config.spinners_enabled()):
            try:
                response = httpx.post(
                    self.url,
                    json=body,
                    headers={
                        "Authorization": f"Bearer {self._token}",
                        "Content-Type": "application/json",
                    },
                    timeout=TIMEOUT,
                )
            except httpx.RequestError as exc:
                logger.debug("Transport failure: %r", exc)
                raise TransportError("Did not get response from server") from exc

        if not response.is_success:
            raise ApiError(
                f"Error: {response.status_code} from {self.url}\n"
                f"Request: {json.dumps(body)}\n"
                f"Response: {response.text}"
            )
        return response.text
