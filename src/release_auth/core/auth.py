"""Authentication header injection.

Attaches the configured credentials to the transport options of requests
whose URL matched the repository allow-list. Requests that did not match
get their options back untouched; this is the only place credentials are
added to host requests.
"""

from dataclasses import replace

from release_auth.constants import MAX_REDIRECTS
from release_auth.core.classifier import UrlClassification
from release_auth.core.headers import (
    has_header,
    mask_headers,
    normalize_header,
    without_header,
)
from release_auth.domain.transfer import TransportOptions
from release_auth.domain.types import Credentials
from release_auth.logger import get_logger

logger = get_logger(__name__)


class AuthHeaderInjector:
    """Build authenticated transport options for allow-listed requests."""

    def __init__(self, credentials: Credentials) -> None:
        """Initialize with the engine's credentials.

        Args:
            credentials: Token and/or basic-auth credentials

        """
        self.credentials = credentials

    def inject(
        self,
        url: str,
        classification: UrlClassification,
        base_options: TransportOptions,
        accept: str | None = None,
    ) -> TransportOptions:
        """Return ``base_options`` augmented with authentication.

        - ``Authorization: token <token>`` for GitHub hosts when a token
          is configured
        - ``Authorization: Basic <...>`` whenever basic auth is configured
        - ``Accept: <accept>`` replacing any existing Accept header
        - redirects followed (max 5) unless the caller chose otherwise

        Headers already present are not added twice.

        Args:
            url: Request URL (used for logging only)
            classification: Result of classifying ``url``
            base_options: Options supplied by the caller
            accept: Optional Accept override, e.g. application/octet-stream

        Returns:
            New options, or ``base_options`` itself when the URL is not
            allow-listed

        """
        if not classification.is_matched:
            return base_options

        headers = [normalize_header(h) for h in base_options.headers]

        token_header = self.credentials.token_header()
        if token_header and classification.is_github_host:
            self._append_once(headers, token_header)

        basic_header = self.credentials.basic_auth_header()
        if basic_header:
            self._append_once(headers, basic_header)

        if accept:
            headers = [*without_header(headers, "Accept"), f"Accept: {accept}"]

        options = replace(
            base_options,
            headers=tuple(headers),
            follow_redirects=(
                True
                if base_options.follow_redirects is None
                else base_options.follow_redirects
            ),
            max_redirects=(
                MAX_REDIRECTS
                if base_options.max_redirects is None
                else base_options.max_redirects
            ),
        )
        logger.debug(
            "Authenticated %s for %s: %s",
            url,
            classification.rule.display_name,
            mask_headers(options.headers),
        )
        return options

    @staticmethod
    def _append_once(headers: list[str], header: str) -> None:
        if not has_header(headers, header):
            headers.append(header)
