"""Package index repository fetched through the authenticated engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from release_auth.exceptions import ConfigurationError, TransferError
from release_auth.logger import get_logger

if TYPE_CHECKING:
    from release_auth.core.transfer import TransferEngine
    from release_auth.domain.rules import RepositoryRule

logger = get_logger(__name__)


class AuthenticatedRepository:
    """A package index whose requests go through :class:`TransferEngine`.

    The engine carries the credentials configured for the host of the
    repository URL and an allow-list holding only this repository.
    """

    def __init__(self, rule: RepositoryRule, engine: TransferEngine) -> None:
        self.rule = rule
        self.engine = engine

    @property
    def url(self) -> str:
        return self.rule.source_url

    async def fetch_index(self) -> dict[str, Any]:
        """Fetch and parse the repository's index document.

        Returns:
            Parsed JSON object

        Raises:
            ConfigurationError: If the rule has no source URL
            TransferError: If the request fails or the body is not a
                JSON object

        """
        if not self.url:
            msg = "repository has no `url`"
            raise ConfigurationError(msg, target=self.rule.display_name)

        logger.debug(
            "Fetching index for %s: %s", self.rule.display_name, self.url
        )
        options = self.engine.authenticate_source(self.url, self.rule)
        result = await self.engine.retrieve_passthrough(self.url, options)
        body = result.body
        if not isinstance(body, bytes):
            body = body.read_bytes()

        try:
            index = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            msg = f"invalid index JSON: {e}"
            raise TransferError(
                msg, url=self.url, status=result.status_code
            ) from e

        if not isinstance(index, dict):
            msg = "index document is not a JSON object"
            raise TransferError(msg, url=self.url, status=result.status_code)
        return index

    def __repr__(self) -> str:
        return (
            f"AuthenticatedRepository({self.rule.display_name!r}, "
            f"{self.url!r})"
        )
