"""Default host transport built on aiohttp."""

from __future__ import annotations

from pathlib import Path

import aiohttp

from release_auth.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_BAD_REQUEST,
    MAX_REDIRECTS,
)
from release_auth.core.file_ops import (
    commit_download,
    partial_path,
    remove_partial,
    stream_to_file,
)
from release_auth.core.http_session import api_timeout
from release_auth.core.redirects import open_following_redirects
from release_auth.domain.transfer import TransferResult, TransportOptions
from release_auth.exceptions import ReleaseAuthError, TransferError
from release_auth.logger import get_logger

logger = get_logger(__name__)


class AiohttpTransport:
    """Host transport used when no host downloader is supplied.

    Honours the ``follow_redirects``/``max_redirects``/``timeout`` fields
    of :class:`TransportOptions` and drops credentials on cross-host
    redirects unless ``forward_auth`` is set.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        forward_auth: bool = False,  # noqa: FBT001, FBT002
    ) -> None:
        """Initialize the transport.

        Args:
            session: aiohttp session for requests
            timeout_seconds: Timeout used when options carry none
            forward_auth: Keep credentials on cross-host redirects

        """
        self.session = session
        self.timeout_seconds = timeout_seconds
        self.forward_auth = forward_auth

    async def get(
        self, url: str, options: TransportOptions
    ) -> TransferResult:
        """Fetch ``url`` into memory."""
        return await self._request(url, options, None)

    async def copy(
        self, url: str, destination: Path, options: TransportOptions
    ) -> TransferResult:
        """Fetch ``url`` and stream the body to ``destination``.

        The body goes to a ``.part`` sibling that replaces
        ``destination`` once the response completes.
        """
        part = partial_path(destination)
        try:
            result = await self._request(url, options, part)
            commit_download(part, destination)
        except BaseException:
            remove_partial(part)
            raise
        result.body = destination
        return result

    async def _request(
        self,
        url: str,
        options: TransportOptions,
        destination: Path | None,
    ) -> TransferResult:
        timeout = api_timeout(options.timeout or self.timeout_seconds)
        max_redirects = (
            MAX_REDIRECTS
            if options.max_redirects is None
            else options.max_redirects
        )
        follow = options.follow_redirects is not False

        try:
            async with open_following_redirects(
                self.session,
                "GET",
                url,
                options.headers,
                timeout=timeout,
                max_redirects=max_redirects,
                forward_auth=self.forward_auth,
                follow=follow,
            ) as response:
                final_url = str(response.url)
                if response.status >= HTTP_BAD_REQUEST:
                    msg = f"HTTP {response.status}"
                    raise TransferError(msg, url=url, status=response.status)

                if destination is None:
                    body = await response.read()
                    return TransferResult(
                        final_url=final_url,
                        status_code=response.status,
                        body=body,
                        bytes_written=len(body),
                    )

                written = await stream_to_file(response, destination)
                return TransferResult(
                    final_url=final_url,
                    status_code=response.status,
                    body=destination,
                    bytes_written=written,
                )
        except ReleaseAuthError:
            raise
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.debug("Transport failure for %s: %s", url, e)
            msg = str(e) or type(e).__name__
            raise TransferError(msg, url=url) from e
