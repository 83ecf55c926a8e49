"""Allow-list loading from the manifest ``extra`` section.

Expected layout::

    {
      "extra": {
        "composer-authenticated-plugin": {
          "repositories": [
            {"url": "https://...", "owner": "acme", "name": "widgets"}
          ]
        }
      }
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import orjson

from release_auth.constants import KEY_REPOSITORIES, PLUGIN_NAME
from release_auth.domain.rules import RepositoryAllowList, RepositoryRule
from release_auth.exceptions import ConfigurationError
from release_auth.logger import get_logger

logger = get_logger(__name__)


def load_manifest_extra(manifest_path: Path) -> dict[str, Any]:
    """Read the manifest file and return its ``extra`` mapping.

    Args:
        manifest_path: Path to the JSON manifest

    Returns:
        The ``extra`` section, empty when absent

    Raises:
        ConfigurationError: If the file cannot be read or parsed

    """
    try:
        data = orjson.loads(manifest_path.read_bytes())
    except OSError as e:
        msg = f"Cannot read manifest: {e}"
        raise ConfigurationError(msg, target=str(manifest_path)) from e
    except orjson.JSONDecodeError as e:
        msg = f"Invalid JSON: {e}"
        raise ConfigurationError(msg, target=str(manifest_path)) from e

    if not isinstance(data, dict):
        msg = "Manifest root must be an object"
        raise ConfigurationError(msg, target=str(manifest_path))

    extra = data.get("extra") or {}
    return extra if isinstance(extra, dict) else {}


def parse_repository_rule(entry: Any, index: int) -> RepositoryRule:
    """Build a rule from one ``repositories`` entry.

    Raises:
        ConfigurationError: If ``owner`` or ``name`` is missing or empty

    """
    if not isinstance(entry, Mapping):
        msg = f"repository entry #{index} must be an object"
        raise ConfigurationError(msg, target=PLUGIN_NAME)

    owner = str(entry.get("owner") or "").strip()
    name = str(entry.get("name") or "").strip()
    if not owner or not name:
        msg = (
            f"repository entry #{index} must set `owner` and `name`; "
            "authentication is disabled for it"
        )
        raise ConfigurationError(msg, target=PLUGIN_NAME)

    return RepositoryRule(
        owner=owner, name=name, source_url=str(entry.get("url") or "")
    )


def load_repository_rules(
    extra: Mapping[str, Any] | None,
) -> tuple[RepositoryAllowList, list[ConfigurationError]]:
    """Build the allow-list from the manifest ``extra`` section.

    Invalid entries are reported and skipped; they never abort loading.

    Args:
        extra: Manifest ``extra`` mapping

    Returns:
        Tuple of (allow-list, errors for skipped entries)

    """
    section = (extra or {}).get(PLUGIN_NAME) or {}
    entries: Any = []
    if isinstance(section, Mapping):
        entries = section.get(KEY_REPOSITORIES) or []
    if not isinstance(entries, list):
        logger.warning("%s.%s must be a list", PLUGIN_NAME, KEY_REPOSITORIES)
        entries = []

    rules: list[RepositoryRule] = []
    errors: list[ConfigurationError] = []
    for index, entry in enumerate(entries):
        try:
            rules.append(parse_repository_rule(entry, index))
        except ConfigurationError as e:
            logger.warning("%s", e)
            errors.append(e)

    logger.debug("Loaded %d allow-listed repositories", len(rules))
    return RepositoryAllowList(rules), errors
