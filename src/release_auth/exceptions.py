"""Exception classes for release-auth operations.

Error taxonomy:
    ConfigurationError: allow-list entry is incomplete (entry disabled)
    AuthenticationError: GitHub rejected the credentials (401/403)
    NotFoundError: release, tag or asset cannot be located
    TransferError: transport-level failure, retried once for GitHub hosts
    RedirectLimitError: redirect chain longer than the fixed cap
    IntegrityError: destination file missing or empty after a transfer

Messages carry the URL, HTTP status and matched repository, never the
credential value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from release_auth.domain.rules import RepositoryRule


class ReleaseAuthError(Exception):
    """Base exception for release-auth operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional URL or path the failure relates to.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class ConfigurationError(ReleaseAuthError):
    """Raised when a repository allow-list entry is invalid."""

    error_prefix = "Invalid repository configuration"


class AuthenticationError(ReleaseAuthError):
    """Raised when GitHub rejects the configured credentials."""

    error_prefix = "Authentication failed"

    def __init__(
        self,
        url: str,
        status: int,
        rule: RepositoryRule | None = None,
    ) -> None:
        """Initialize with the rejected URL, status and matched rule.

        Args:
            url: URL that answered with 401/403.
            status: HTTP status code.
            rule: Repository rule that caused credentials to be attached.

        """
        repository = rule.display_name if rule else "unmatched repository"
        message = (
            f"HTTP {status} using credentials for {repository}; "
            "check the configured token"
        )
        super().__init__(message, target=url)
        self.url = url
        self.status = status
        self.rule = rule


class NotFoundError(ReleaseAuthError):
    """Raised when a release or release asset cannot be located."""

    error_prefix = "Release asset not found"


class TransferError(ReleaseAuthError):
    """Raised when the underlying transport fails."""

    error_prefix = "Transfer failed"

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status: int | None = None,
    ) -> None:
        """Initialize with an optional URL and HTTP status.

        Args:
            message: Error message describing the failure.
            url: URL being transferred.
            status: HTTP status code when the server answered.

        """
        super().__init__(message, target=url)
        self.url = url
        self.status = status


class RedirectLimitError(ReleaseAuthError):
    """Raised when a redirect chain exceeds the allowed number of hops."""

    error_prefix = "Too many redirects"

    def __init__(self, url: str, max_redirects: int) -> None:
        """Initialize with the starting URL and the cap that was hit.

        Args:
            url: URL the redirect chain started from.
            max_redirects: Maximum number of redirects allowed.

        """
        super().__init__(
            f"more than {max_redirects} redirects", target=url
        )
        self.url = url
        self.max_redirects = max_redirects


class IntegrityError(ReleaseAuthError):
    """Raised when a transfer leaves no usable file at the destination."""

    error_prefix = "Download integrity check failed"
