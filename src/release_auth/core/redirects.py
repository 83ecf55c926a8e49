"""Manual redirect handling with a hop cap and a credential policy.

aiohttp's built-in redirect handling is disabled for every request so
that:

- the chain is capped at ``max_redirects``; one more redirect raises
  :class:`RedirectLimitError` instead of being followed,
- ``Authorization`` headers only travel to the same host or between
  GitHub hosts. Redirect targets elsewhere (release CDN, S3 signed URLs)
  receive no credentials unless ``forward_auth`` is set.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from urllib.parse import urljoin

import aiohttp

from release_auth.constants import MAX_REDIRECTS, REDIRECT_STATUSES
from release_auth.core.classifier import is_github_hostname, url_host
from release_auth.core.headers import (
    AUTHORIZATION,
    to_multidict,
    without_header,
)
from release_auth.exceptions import RedirectLimitError
from release_auth.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class RedirectResolution:
    """Where a redirect chain ended.

    Attributes:
        url: Final location (not requested when it left GitHub hosts)
        status: Status of the last response received
        redirects: Number of redirects observed

    """

    url: str
    status: int
    redirects: int


def redirect_target(
    response: aiohttp.ClientResponse, current_url: str
) -> str | None:
    """Return the absolute redirect target of ``response``, if any."""
    if response.status not in REDIRECT_STATUSES:
        return None
    location = response.headers.get("Location")
    if not location:
        return None
    return urljoin(current_url, location)


def credentials_allowed(
    source_url: str,
    target_url: str,
    forward_auth: bool = False,  # noqa: FBT001, FBT002
) -> bool:
    """Return whether credentials may follow a redirect.

    Args:
        source_url: URL that answered with the redirect
        target_url: Redirect target
        forward_auth: Forward credentials to any host

    """
    if forward_auth:
        return True
    source_host = url_host(source_url)
    target_host = url_host(target_url)
    if source_host and source_host == target_host:
        return True
    return is_github_hostname(source_host) and is_github_hostname(target_host)


def headers_for_redirect(
    headers: Iterable[str],
    source_url: str,
    target_url: str,
    forward_auth: bool = False,  # noqa: FBT001, FBT002
) -> tuple[str, ...]:
    """Return the headers to send to ``target_url``."""
    headers = tuple(headers)
    if credentials_allowed(source_url, target_url, forward_auth):
        return headers
    stripped = without_header(headers, AUTHORIZATION)
    if len(stripped) != len(headers):
        logger.debug(
            "Dropping credentials on redirect to %s", url_host(target_url)
        )
    return stripped


@asynccontextmanager
async def open_following_redirects(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    headers: Iterable[str],
    *,
    timeout: aiohttp.ClientTimeout,
    max_redirects: int = MAX_REDIRECTS,
    forward_auth: bool = False,
    follow: bool = True,
) -> AsyncIterator[aiohttp.ClientResponse]:
    """Issue a request, following redirects, and yield the final response.

    Args:
        session: aiohttp session
        method: HTTP method of the first request
        url: Request URL
        headers: Raw header lines
        timeout: Timeout applied to every hop
        max_redirects: Redirects allowed before failing
        forward_auth: Keep credentials on cross-host redirects
        follow: When False the first response is yielded as-is

    Yields:
        The first non-redirect response

    Raises:
        RedirectLimitError: If the chain is longer than ``max_redirects``

    """
    current_url = url
    current_method = method
    current_headers = tuple(headers)
    redirects = 0

    while True:
        async with session.request(
            current_method,
            current_url,
            headers=to_multidict(current_headers),
            allow_redirects=False,
            timeout=timeout,
        ) as response:
            location = (
                redirect_target(response, current_url) if follow else None
            )
            if location is None:
                yield response
                return
            status = response.status

        if redirects >= max_redirects:
            raise RedirectLimitError(url, max_redirects)
        redirects += 1
        logger.debug("Redirect %d: %s -> %s", redirects, status, location)

        if status == 303 and current_method != "HEAD":  # noqa: PLR2004
            current_method = "GET"
        current_headers = headers_for_redirect(
            current_headers, current_url, location, forward_auth
        )
        current_url = location


async def resolve_location(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    headers: Iterable[str],
    *,
    timeout: aiohttp.ClientTimeout,
    max_redirects: int = MAX_REDIRECTS,
    forward_auth: bool = False,
    stop_at_foreign_host: bool = True,
) -> RedirectResolution:
    """Walk a redirect chain without reading any body.

    With ``stop_at_foreign_host`` the walk ends at the first location
    outside GitHub hosts; that location is returned without being
    requested (signed CDN URLs are method-specific and short-lived).

    Raises:
        RedirectLimitError: If the chain is longer than ``max_redirects``

    """
    current_url = url
    current_headers = tuple(headers)
    redirects = 0

    while True:
        async with session.request(
            method,
            current_url,
            headers=to_multidict(current_headers),
            allow_redirects=False,
            timeout=timeout,
        ) as response:
            status = response.status
            location = redirect_target(response, current_url)

        if location is None:
            return RedirectResolution(current_url, status, redirects)
        if redirects >= max_redirects:
            raise RedirectLimitError(url, max_redirects)
        redirects += 1

        if stop_at_foreign_host and not is_github_hostname(url_host(location)):
            return RedirectResolution(location, status, redirects)

        current_headers = headers_for_redirect(
            current_headers, current_url, location, forward_auth
        )
        current_url = location
