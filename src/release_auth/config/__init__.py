"""Configuration: settings file, manifest allow-list and credentials."""

from release_auth.config.credentials import load_credentials
from release_auth.config.manifest import (
    load_manifest_extra,
    load_repository_rules,
    parse_repository_rule,
)
from release_auth.config.paths import Paths
from release_auth.config.settings import SettingsManager
from release_auth.config.token import KeyringTokenStore

__all__ = [
    "KeyringTokenStore",
    "Paths",
    "SettingsManager",
    "load_credentials",
    "load_manifest_extra",
    "load_repository_rules",
    "parse_repository_rule",
]
