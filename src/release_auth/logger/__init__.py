"""Logging utilities for release-auth.

Architecture:
    Application → QueueHandler → Queue → QueueListener Thread
                                              ↓
                                    Console + File Handlers

Usage:
    >>> from release_auth.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Resolving %s", url)  # Use %-style formatting

Environment Variables:
    RELEASE_AUTH_LOG_DIR: Redirect the log file (used by the test suite).

Rules:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Never attach handlers to child loggers
    4. Never log credential values; mask header lists first
       (release_auth.core.headers.mask_headers)
"""

from typing import TYPE_CHECKING

from release_auth.logger.config import (
    update_logger_from_config as _update_config,
)
from release_auth.logger.formatters import HybridConsoleFormatter
from release_auth.logger.handlers import LoggingConfigurationError
from release_auth.logger.logger import get_logger
from release_auth.logger.state import get_state

if TYPE_CHECKING:
    from release_auth.domain.types import GlobalConfig

__all__ = [
    "HybridConsoleFormatter",
    "LoggingConfigurationError",
    "get_logger",
    "get_state",
    "update_logger_from_config",
]


def update_logger_from_config(settings: "GlobalConfig | None" = None) -> None:
    """Apply log levels from ``settings`` or the settings file."""
    _update_config(get_state(), settings)
