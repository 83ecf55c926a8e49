"""Configuration and credential types for release-auth."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import TypedDict

# =============================================================================
# Settings Types
# =============================================================================


class NetworkConfig(TypedDict):
    """Network configuration options."""

    timeout_seconds: int
    transfer_timeout_minutes: int


class AuthConfig(TypedDict):
    """Credential handling options."""

    forward_auth_on_redirect: bool


class GlobalConfig(TypedDict):
    """Settings file contents."""

    log_level: str
    console_log_level: str
    network: NetworkConfig
    auth: AuthConfig


# =============================================================================
# Credentials
# =============================================================================


@dataclass(slots=True, frozen=True)
class Credentials:
    """Static credentials handed to the engine at construction.

    Both kinds may be present; each is applied independently.

    Attributes:
        github_token: Token sent as ``Authorization: token <token>``
        basic_auth: ``(username, password)`` sent as HTTP basic auth

    """

    github_token: str | None = field(default=None, repr=False)
    basic_auth: tuple[str, str] | None = field(default=None, repr=False)

    @property
    def has_token(self) -> bool:
        return bool(self.github_token)

    @property
    def has_basic_auth(self) -> bool:
        return self.basic_auth is not None

    def token_header(self) -> str | None:
        """Return the GitHub token Authorization header, if configured."""
        if not self.github_token:
            return None
        return f"Authorization: token {self.github_token}"

    def basic_auth_header(self) -> str | None:
        """Return the basic Authorization header, if configured."""
        if self.basic_auth is None:
            return None
        username, password = self.basic_auth
        encoded = base64.b64encode(f"{username}:{password}".encode()).decode(
            "ascii"
        )
        return f"Authorization: Basic {encoded}"

    def __repr__(self) -> str:
        return (
            f"Credentials(github_token={'set' if self.has_token else None}, "
            f"basic_auth={'set' if self.has_basic_auth else None})"
        )
