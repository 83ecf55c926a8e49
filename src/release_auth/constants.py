"""Centralized constants module for release-auth.

This module serves as the single source of truth for all shared constants
across the release-auth codebase. Constants are organized by logical
categories and use typing.Final annotations to ensure immutability.

Usage:
    from release_auth.constants import MAX_REDIRECTS
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = "release-auth"
DEFAULT_CONFIG_SUBDIR: Final[str] = ".config"

# Environment overrides (used by tests to isolate from the user's home)
ENV_CONFIG_DIR: Final[str] = "RELEASE_AUTH_CONFIG_DIR"
ENV_LOG_DIR: Final[str] = "RELEASE_AUTH_LOG_DIR"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10
DEFAULT_TRANSFER_TIMEOUT_MINUTES: Final[int] = 5
DEFAULT_FORWARD_AUTH_ON_REDIRECT: Final[bool] = False

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_NETWORK: Final[str] = "network"
SECTION_AUTH: Final[str] = "auth"

KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"
KEY_TIMEOUT_SECONDS: Final[str] = "timeout_seconds"
KEY_TRANSFER_TIMEOUT_MINUTES: Final[str] = "transfer_timeout_minutes"
KEY_FORWARD_AUTH_ON_REDIRECT: Final[str] = "forward_auth_on_redirect"

VALID_LOG_LEVELS: Final[tuple[str, ...]] = (
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)

# =============================================================================
# Manifest / host configuration keys
# =============================================================================

# Key of the plugin section inside the manifest "extra" block
PLUGIN_NAME: Final[str] = "composer-authenticated-plugin"
KEY_REPOSITORIES: Final[str] = "repositories"

# Host credential tables, keyed by host name
HOST_GITHUB_OAUTH: Final[str] = "github-oauth"
HOST_HTTP_BASIC: Final[str] = "http-basic"

# =============================================================================
# GitHub Constants
# =============================================================================

GITHUB_HOST: Final[str] = "github.com"
GITHUB_API_HOST: Final[str] = "api.github.com"
GITHUB_HOST_SUFFIX: Final[str] = ".github.com"
GITHUB_API_BASE_URL: Final[str] = "https://api.github.com"

RELEASE_DOWNLOAD_MARKER: Final[str] = "/releases/download/"
RELEASE_ASSET_MARKER: Final[str] = "/releases/assets/"

# Root marker plus owner, name and at least two more segments
MIN_PATH_SEGMENTS: Final[int] = 5

ACCEPT_GITHUB_JSON: Final[str] = "application/vnd.github+json"
ACCEPT_OCTET_STREAM: Final[str] = "application/octet-stream"

# Fixed for all GitHub asset resolution
MAX_REDIRECTS: Final[int] = 5

REDIRECT_STATUSES: Final[frozenset[int]] = frozenset({301, 302, 303, 307, 308})
HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_FORBIDDEN: Final[int] = 403
HTTP_NOT_FOUND: Final[int] = 404
HTTP_BAD_REQUEST: Final[int] = 400

# =============================================================================
# Transfer Constants
# =============================================================================

CHUNK_SIZE: Final[int] = 8192
PARTIAL_SUFFIX: Final[str] = ".part"
MASKED_VALUE: Final[str] = "***"

# =============================================================================
# Logging Constants
# =============================================================================

LOG_FILE_NAME: Final[str] = "release-auth.log"
LOG_ROOT_NAME: Final[str] = "release_auth"
LOG_MAX_FILE_SIZE_BYTES: Final[int] = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT: Final[int] = 3

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
