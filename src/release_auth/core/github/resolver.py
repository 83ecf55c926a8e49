"""Browser release link resolution against the GitHub REST API.

A browser link ``<owner>/<repo>/releases/download/<tag>/<filename>``
cannot be fetched with a token for private repositories. It is resolved
in two hops:

1. ``GET /repos/<owner>/<repo>/releases/tags/<tag>`` and pick the asset
   whose name equals ``<filename>``.
2. ``HEAD /repos/<owner>/<repo>/releases/assets/<id>`` with
   ``Accept: application/octet-stream``; the redirect target is the
   actual binary location.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, unquote, urlsplit

import aiohttp
import orjson

from release_auth.constants import (
    ACCEPT_GITHUB_JSON,
    ACCEPT_OCTET_STREAM,
    DEFAULT_TIMEOUT_SECONDS,
    GITHUB_API_BASE_URL,
    HTTP_BAD_REQUEST,
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
    MAX_REDIRECTS,
)
from release_auth.core.github.models import BrowserReleaseLink, ReleaseAsset
from release_auth.core.headers import to_multidict
from release_auth.core.http_session import api_timeout
from release_auth.core.redirects import resolve_location
from release_auth.domain.rules import RepositoryRule
from release_auth.domain.types import Credentials
from release_auth.exceptions import (
    AuthenticationError,
    NotFoundError,
    TransferError,
)
from release_auth.logger import get_logger

logger = get_logger(__name__)

_BROWSER_LINK_SEGMENTS = 6


class AssetResolver:
    """Resolves browser release links to downloadable locations."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        credentials: Credentials,
        *,
        api_base_url: str = GITHUB_API_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the resolver.

        Args:
            session: aiohttp session for API requests
            credentials: Only the token is used; basic auth is never sent
                to the API
            api_base_url: GitHub REST API root
            timeout_seconds: Base timeout for each API hop

        """
        self.session = session
        self.credentials = credentials
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = api_timeout(timeout_seconds)

    @staticmethod
    def parse_browser_url(url: str) -> BrowserReleaseLink | None:
        """Split a browser release link into its components.

        Returns:
            The link components, or None unless the path is exactly
            ``<owner>/<repo>/releases/download/<tag>/<filename>``

        """
        try:
            path = urlsplit(url).path
        except (ValueError, AttributeError):
            return None

        segments = path.strip("/").split("/")
        if len(segments) != _BROWSER_LINK_SEGMENTS or not all(segments):
            return None
        owner, repo, releases, download, tag, filename = segments
        if (releases, download) != ("releases", "download"):
            return None
        return BrowserReleaseLink(owner, repo, unquote(tag), unquote(filename))

    def asset_api_url(self, owner: str, repo: str, asset_id: int) -> str:
        return (
            f"{self.api_base_url}/repos/{owner}/{repo}/releases/assets/"
            f"{asset_id}"
        )

    def _api_headers(self, accept: str) -> list[str]:
        headers = [f"Accept: {accept}"]
        token_header = self.credentials.token_header()
        if token_header:
            headers.append(token_header)
        return headers

    async def fetch_release(
        self,
        owner: str,
        repo: str,
        tag: str,
        rule: RepositoryRule | None = None,
    ) -> dict[str, Any]:
        """Fetch release metadata for ``tag``.

        Args:
            owner: Repository owner
            repo: Repository name
            tag: Release tag
            rule: Matched allow-list rule, used for error context

        Returns:
            Release JSON object

        Raises:
            AuthenticationError: On 401/403
            NotFoundError: On 404
            TransferError: On other failures

        """
        url = (
            f"{self.api_base_url}/repos/{owner}/{repo}/releases/tags/"
            f"{quote(tag, safe='')}"
        )
        logger.debug("Fetching release metadata: %s", url)
        try:
            async with self.session.get(
                url,
                headers=to_multidict(self._api_headers(ACCEPT_GITHUB_JSON)),
                timeout=self.timeout,
            ) as response:
                status = response.status
                if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
                    raise AuthenticationError(url, status, rule)
                if status == HTTP_NOT_FOUND:
                    msg = f"no release tagged {tag!r} in {owner}/{repo}"
                    raise NotFoundError(msg, target=url)
                if status >= HTTP_BAD_REQUEST:
                    msg = f"HTTP {status} fetching release metadata"
                    raise TransferError(msg, url=url, status=status)
                body = await response.read()
        except (aiohttp.ClientError, TimeoutError) as e:
            msg = str(e) or type(e).__name__
            raise TransferError(msg, url=url) from e

        try:
            release = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            msg = f"invalid release metadata: {e}"
            raise TransferError(msg, url=url) from e
        if not isinstance(release, dict):
            msg = "release metadata is not an object"
            raise TransferError(msg, url=url)
        return release

    @staticmethod
    def find_asset(release: dict[str, Any], filename: str) -> ReleaseAsset:
        """Return the asset named exactly ``filename``.

        Raises:
            NotFoundError: If no asset carries that name

        """
        for asset_data in release.get("assets") or []:
            if not isinstance(asset_data, dict):
                continue
            asset = ReleaseAsset.from_api_response(asset_data)
            if asset is not None and asset.name == filename:
                return asset

        tag = release.get("tag_name") or "release"
        msg = f"{tag} has no asset named {filename!r}"
        raise NotFoundError(msg, target=filename)

    async def resolve_asset_api_url(
        self, browser_url: str, rule: RepositoryRule | None = None
    ) -> str | None:
        """Map a browser release link to its asset API URL.

        Returns:
            ``{api}/repos/<owner>/<repo>/releases/assets/<id>``, or None
            when the link, release or asset cannot be found

        Raises:
            AuthenticationError: If the API rejects the token

        """
        link = self.parse_browser_url(browser_url)
        if link is None:
            logger.debug("Not a browser release link: %s", browser_url)
            return None

        try:
            release = await self.fetch_release(
                link.owner, link.repo, link.tag, rule
            )
            asset = self.find_asset(release, link.filename)
        except NotFoundError as e:
            logger.info("%s", e)
            return None

        return self.asset_api_url(link.owner, link.repo, asset.id)

    async def resolve_download_location(
        self, asset_api_url: str, rule: RepositoryRule | None = None
    ) -> str:
        """Find where an asset API URL redirects to.

        The redirect chain is walked with ``HEAD`` requests until it
        leaves GitHub hosts; that location is returned without being
        requested.

        Returns:
            The redirect target, or ``asset_api_url`` when there is none

        Raises:
            AuthenticationError: On 401/403
            NotFoundError: On 404
            RedirectLimitError: If the chain has more than 5 redirects
            TransferError: On network failure

        """
        try:
            resolution = await resolve_location(
                self.session,
                "HEAD",
                asset_api_url,
                self._api_headers(ACCEPT_OCTET_STREAM),
                timeout=self.timeout,
                max_redirects=MAX_REDIRECTS,
            )
        except (aiohttp.ClientError, TimeoutError) as e:
            msg = str(e) or type(e).__name__
            raise TransferError(msg, url=asset_api_url) from e

        if resolution.redirects == 0:
            if resolution.status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
                raise AuthenticationError(
                    asset_api_url, resolution.status, rule
                )
            if resolution.status == HTTP_NOT_FOUND:
                msg = "release asset does not exist"
                raise NotFoundError(msg, target=asset_api_url)

        logger.debug(
            "Asset %s resolved after %d redirect(s)",
            asset_api_url,
            resolution.redirects,
        )
        return resolution.url

    async def resolve_browser_release_url(
        self, browser_url: str, rule: RepositoryRule | None = None
    ) -> str | None:
        """Resolve a browser release link to the binary's location.

        Returns:
            Downloadable location, or None when not found

        Raises:
            AuthenticationError: If the API rejects the token

        """
        asset_url = await self.resolve_asset_api_url(browser_url, rule)
        if asset_url is None:
            return None
        try:
            return await self.resolve_download_location(asset_url, rule)
        except NotFoundError as e:
            logger.info("%s", e)
            return None
