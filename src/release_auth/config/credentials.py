"""Credential lookup from the host's configuration tables.

The host keeps two tables keyed by host name::

    github-oauth: {"github.com": "<token>"}
    http-basic:   {"repo.example.com": {"username": "u", "password": "p"}}

Lookup happens once, when the engine is built; request handling only sees
the resulting :class:`Credentials` value.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from release_auth.constants import GITHUB_API_HOST, GITHUB_HOST
from release_auth.domain.types import Credentials
from release_auth.logger import get_logger

if TYPE_CHECKING:
    from release_auth.config.token import KeyringTokenStore

logger = get_logger(__name__)


def _lookup_token(
    github_oauth: Mapping[str, Any], host: str | None
) -> str | None:
    candidates = [host] if host else []
    candidates += [GITHUB_API_HOST, GITHUB_HOST]
    for candidate in candidates:
        token = github_oauth.get(candidate)
        if isinstance(token, str) and token.strip():
            logger.debug("Using GitHub token configured for %s", candidate)
            return token.strip()
    return None


def _complete_basic(entry: Any) -> tuple[str, str] | None:
    if not isinstance(entry, Mapping):
        return None
    username = entry.get("username")
    password = entry.get("password")
    if username and password:
        return str(username), str(password)
    return None


def _lookup_basic(
    http_basic: Mapping[str, Any], host: str | None
) -> tuple[str, str] | None:
    if host:
        pair = _complete_basic(http_basic.get(host))
        if pair is not None:
            logger.debug("Using basic auth configured for %s", host)
            return pair

    for entry_host, entry in http_basic.items():
        pair = _complete_basic(entry)
        if pair is not None:
            logger.debug("Using basic auth configured for %s", entry_host)
            return pair
    return None


def load_credentials(
    github_oauth: Mapping[str, Any] | None = None,
    http_basic: Mapping[str, Any] | None = None,
    host: str | None = None,
    token_store: KeyringTokenStore | None = None,
) -> Credentials:
    """Resolve the credentials the engine will use.

    Token: entry for ``host``, then ``api.github.com``, then
    ``github.com``, then ``token_store``. Basic auth: entry for ``host``,
    then the first entry with both username and password.

    Args:
        github_oauth: Host token table keyed by host name
        http_basic: Host basic-auth table keyed by host name
        host: Preferred host (e.g. a repository's source URL host)
        token_store: Optional keyring fallback for the token

    Returns:
        Credentials value; either part may be None

    """
    token = _lookup_token(github_oauth or {}, host)
    if token is None and token_store is not None:
        token = token_store.get()

    return Credentials(
        github_token=token,
        basic_auth=_lookup_basic(http_basic or {}, host),
    )
