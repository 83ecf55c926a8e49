"""Configuration loading and updating for logging system.

Bootstrap levels are hardcoded so the logger can be created before the
settings module is importable; ``update_logger_from_config`` applies the
settings file afterwards (late import avoids the circular dependency).
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from release_auth.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    ENV_LOG_DIR,
    LOG_FILE_NAME,
)

if TYPE_CHECKING:
    from release_auth.domain.types import GlobalConfig
    from release_auth.logger.state import LoggerState


def load_log_settings() -> tuple[str, str, Path]:
    """Load default console level, file level, and file path.

    Environment Variable Override:
        RELEASE_AUTH_LOG_DIR: Overrides the log directory path. The test
        suite points it at a temporary directory so test runs never write
        into the user's configuration directory.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(ENV_LOG_DIR)
    if env_log_dir:
        log_path = Path(env_log_dir).expanduser() / LOG_FILE_NAME
    else:
        log_path = (
            Path.home()
            / DEFAULT_CONFIG_SUBDIR
            / CONFIG_DIR_NAME
            / "logs"
            / LOG_FILE_NAME
        )

    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def update_logger_from_config(
    state: "LoggerState", settings: "GlobalConfig | None" = None
) -> None:
    """Apply configured levels to the console and file handlers.

    Only handler levels change; handlers are never added or removed.

    Args:
        state: Shared logger state
        settings: Loaded settings; read from the settings file when None

    """
    if settings is None:
        from release_auth.config.settings import (  # noqa: PLC0415
            SettingsManager,
        )

        settings = SettingsManager().load_settings()

    console_level = getattr(
        logging, settings["console_log_level"], logging.WARNING
    )
    file_level = getattr(logging, settings["log_level"], logging.INFO)

    if state.queue_listener is not None:
        for handler in state.queue_listener.handlers:
            if isinstance(handler, RotatingFileHandler):
                handler.setLevel(file_level)
            elif isinstance(handler, logging.StreamHandler):
                handler.setLevel(console_level)

    state.config_applied = True
