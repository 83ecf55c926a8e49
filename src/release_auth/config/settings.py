"""Settings manager for the INI configuration file.

Example ``settings.conf``::

    [DEFAULT]
    log_level = INFO
    console_log_level = WARNING

    [network]
    timeout_seconds = 10
    transfer_timeout_minutes = 5

    [auth]
    forward_auth_on_redirect = false
"""

import configparser
import logging
from pathlib import Path

from release_auth.config.paths import Paths
from release_auth.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_FORWARD_AUTH_ON_REDIRECT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TRANSFER_TIMEOUT_MINUTES,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_FORWARD_AUTH_ON_REDIRECT,
    KEY_LOG_LEVEL,
    KEY_TIMEOUT_SECONDS,
    KEY_TRANSFER_TIMEOUT_MINUTES,
    SECTION_AUTH,
    SECTION_DEFAULT,
    SECTION_NETWORK,
    VALID_LOG_LEVELS,
)
from release_auth.domain.types import AuthConfig, GlobalConfig, NetworkConfig

logger = logging.getLogger(__name__)


class SettingsManager:
    """Manages the INI settings file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.config_dir())

        """
        self.config_dir = config_dir or Paths.config_dir()
        self.settings_file = self.config_dir / CONFIG_FILE_NAME

    def get_default_settings(self) -> GlobalConfig:
        """Return default settings."""
        return GlobalConfig(
            log_level=DEFAULT_LOG_LEVEL,
            console_log_level=DEFAULT_CONSOLE_LOG_LEVEL,
            network=NetworkConfig(
                timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
                transfer_timeout_minutes=DEFAULT_TRANSFER_TIMEOUT_MINUTES,
            ),
            auth=AuthConfig(
                forward_auth_on_redirect=DEFAULT_FORWARD_AUTH_ON_REDIRECT,
            ),
        )

    def load_settings(self) -> GlobalConfig:
        """Load settings, falling back to defaults for missing values.

        The file is only read; it is never created implicitly.

        Returns:
            Typed settings

        """
        settings = self.get_default_settings()
        if not self.settings_file.exists():
            return settings

        parser = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )
        try:
            parser.read(self.settings_file, encoding="utf-8")
        except configparser.Error as e:
            logger.warning(
                "Ignoring unreadable settings file %s: %s",
                self.settings_file,
                e,
            )
            return settings

        defaults = parser[SECTION_DEFAULT]
        settings["log_level"] = self._level(
            defaults.get(KEY_LOG_LEVEL), settings["log_level"]
        )
        settings["console_log_level"] = self._level(
            defaults.get(KEY_CONSOLE_LOG_LEVEL), settings["console_log_level"]
        )

        if parser.has_section(SECTION_NETWORK):
            network = parser[SECTION_NETWORK]
            settings["network"]["timeout_seconds"] = self._positive_int(
                network, KEY_TIMEOUT_SECONDS, DEFAULT_TIMEOUT_SECONDS
            )
            settings["network"]["transfer_timeout_minutes"] = (
                self._positive_int(
                    network,
                    KEY_TRANSFER_TIMEOUT_MINUTES,
                    DEFAULT_TRANSFER_TIMEOUT_MINUTES,
                )
            )

        if parser.has_section(SECTION_AUTH):
            try:
                forward_auth = parser.getboolean(
                    SECTION_AUTH,
                    KEY_FORWARD_AUTH_ON_REDIRECT,
                    fallback=DEFAULT_FORWARD_AUTH_ON_REDIRECT,
                )
                settings["auth"]["forward_auth_on_redirect"] = forward_auth
            except ValueError:
                logger.warning(
                    "Invalid %s value, using default",
                    KEY_FORWARD_AUTH_ON_REDIRECT,
                )

        return settings

    def save_settings(self, settings: GlobalConfig) -> None:
        """Write settings to the INI file.

        Args:
            settings: Settings to persist

        """
        parser = configparser.ConfigParser(interpolation=None)
        parser[SECTION_DEFAULT] = {
            KEY_LOG_LEVEL: settings["log_level"],
            KEY_CONSOLE_LOG_LEVEL: settings["console_log_level"],
        }
        parser[SECTION_NETWORK] = {
            KEY_TIMEOUT_SECONDS: str(settings["network"]["timeout_seconds"]),
            KEY_TRANSFER_TIMEOUT_MINUTES: str(
                settings["network"]["transfer_timeout_minutes"]
            ),
        }
        parser[SECTION_AUTH] = {
            KEY_FORWARD_AUTH_ON_REDIRECT: str(
                settings["auth"]["forward_auth_on_redirect"]
            ).lower(),
        }

        self.config_dir.mkdir(parents=True, exist_ok=True)
        with self.settings_file.open("w", encoding="utf-8") as f:
            parser.write(f)

    @staticmethod
    def _level(value: str | None, default: str) -> str:
        if value is None:
            return default
        level = value.strip().upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning("Invalid log level '%s', using %s", value, default)
            return default
        return level

    @staticmethod
    def _positive_int(
        section: configparser.SectionProxy, key: str, default: int
    ) -> int:
        raw = section.get(key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            logger.warning("Invalid %s '%s', using %s", key, raw, default)
            return default
        if value <= 0:
            logger.warning("Invalid %s '%s', using %s", key, raw, default)
            return default
        return value
