"""URL classification for authenticated downloads.

Decides, without any network access, whether a request URL:

- points at a GitHub host (``github.com``, ``api.github.com`` or any
  ``*.github.com`` Enterprise subdomain),
- is a browser release link (``/releases/download/``) or an asset API URL
  (``/releases/assets/``),
- belongs to an allow-listed repository.

The allow-list check is the single gate for attaching credentials; every
malformed or unexpectedly short URL classifies as not matched.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from release_auth.constants import (
    GITHUB_API_HOST,
    GITHUB_HOST,
    GITHUB_HOST_SUFFIX,
    MIN_PATH_SEGMENTS,
    RELEASE_ASSET_MARKER,
    RELEASE_DOWNLOAD_MARKER,
)
from release_auth.domain.rules import RepositoryAllowList, RepositoryRule


@dataclass(slots=True, frozen=True)
class UrlClassification:
    """Classification of a single request URL.

    Attributes:
        is_github_host: Host is github.com, api.github.com or *.github.com
        rule: Allow-list rule matched by the URL's owner/name segments
        is_release_download: Path contains ``/releases/download/``
        is_release_asset: Path contains ``/releases/assets/``

    """

    is_github_host: bool = False
    rule: RepositoryRule | None = None
    is_release_download: bool = False
    is_release_asset: bool = False

    @property
    def is_matched(self) -> bool:
        return self.rule is not None

    @property
    def owner_repo_match(self) -> tuple[str, str] | None:
        if self.rule is None:
            return None
        return self.rule.owner, self.rule.name


NOT_MATCHED = UrlClassification()


def is_github_hostname(host: str | None) -> bool:
    if not host:
        return False
    host = host.lower().rstrip(".")
    return (
        host in (GITHUB_API_HOST, GITHUB_HOST)
        or host.endswith(GITHUB_HOST_SUFFIX)
    )


def url_host(url: str) -> str | None:
    """Return the lower-cased host of ``url``, or None if unparseable."""
    try:
        return urlsplit(url).hostname
    except (ValueError, AttributeError):
        return None


def is_github_host(url: str) -> bool:
    """Return True when ``url`` points at a GitHub host."""
    return is_github_hostname(url_host(url))


def decompose_path(path: str) -> list[str]:
    """Split a URL path into structural segments.

    The leading ``repos`` segment (API URLs) and the ``releases/download``
    pair (browser links) are dropped, empty segments discarded, and a root
    marker kept at index 0 so the owner lands at index 1 and the name at
    index 2::

        /repos/acme/widgets/releases/assets/42
            -> ["", "acme", "widgets", "releases", "assets", "42"]
        /acme/widgets/releases/download/v1/app.zip
            -> ["", "acme", "widgets", "v1", "app.zip"]
    """
    segments = [segment for segment in path.split("/") if segment]
    if segments and segments[0] == "repos":
        segments = segments[1:]

    for index in range(len(segments) - 1):
        if segments[index] == "releases" and segments[index + 1] == "download":
            del segments[index : index + 2]
            break

    return ["", *segments]


class URLClassifier:
    """Classifies request URLs against a repository allow-list."""

    def __init__(self, allow_list: RepositoryAllowList) -> None:
        self.allow_list = allow_list

    def classify(self, url: str) -> UrlClassification:
        """Classify ``url``; never raises.

        Args:
            url: Request URL handed over by the host

        Returns:
            Classification; ``NOT_MATCHED`` for unparseable URLs

        """
        if not isinstance(url, str) or not url:
            return NOT_MATCHED
        try:
            parts = urlsplit(url)
            host = parts.hostname
        except ValueError:
            return NOT_MATCHED

        path = parts.path
        if not host or not path:
            return NOT_MATCHED

        segments = decompose_path(path)
        rule = None
        if len(segments) >= MIN_PATH_SEGMENTS:
            rule = self.allow_list.match(segments[1], segments[2])

        return UrlClassification(
            is_github_host=is_github_hostname(host),
            rule=rule,
            is_release_download=RELEASE_DOWNLOAD_MARKER in path,
            is_release_asset=RELEASE_ASSET_MARKER in path,
        )
