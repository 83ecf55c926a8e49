"""Path constants and utilities for release-auth configuration."""

import os
from pathlib import Path

from release_auth.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_SUBDIR,
    ENV_CONFIG_DIR,
)


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    CONFIG_DIR = HOME_DIR / DEFAULT_CONFIG_SUBDIR / CONFIG_DIR_NAME
    LOGS_DIR = CONFIG_DIR / "logs"
    SETTINGS_FILE = CONFIG_DIR / CONFIG_FILE_NAME

    @classmethod
    def config_dir(cls) -> Path:
        """Return the configuration directory.

        ``RELEASE_AUTH_CONFIG_DIR`` takes precedence over the default
        ``~/.config/release-auth``.
        """
        override = os.getenv(ENV_CONFIG_DIR)
        if override:
            return Path(override).expanduser()
        return cls.CONFIG_DIR
