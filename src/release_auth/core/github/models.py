"""GitHub release data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class BrowserReleaseLink:
    """Components of ``<owner>/<repo>/releases/download/<tag>/<filename>``."""

    owner: str
    repo: str
    tag: str
    filename: str


@dataclass(slots=True, frozen=True)
class ReleaseAsset:
    """Represents a GitHub release asset.

    Attributes:
        id: Numeric asset identifier
        name: Asset filename
        size: Asset size in bytes
        content_type: MIME type reported by GitHub
        url: Asset API URL (``.../releases/assets/<id>``)
        browser_download_url: Browser download link

    """

    id: int
    name: str
    size: int = 0
    content_type: str = ""
    url: str = ""
    browser_download_url: str = ""

    @classmethod
    def from_api_response(
        cls, asset_data: dict[str, Any]
    ) -> ReleaseAsset | None:
        """Create ReleaseAsset from GitHub API response data.

        Args:
            asset_data: Raw asset data from GitHub API

        Returns:
            ReleaseAsset instance or None if required fields are missing

        """
        try:
            asset_id = asset_data.get("id")
            name = asset_data.get("name", "")
            if asset_id is None or not name:
                return None

            return cls(
                id=int(asset_id),
                name=name,
                size=int(asset_data.get("size") or 0),
                content_type=asset_data.get("content_type") or "",
                url=asset_data.get("url") or "",
                browser_download_url=asset_data.get("browser_download_url")
                or "",
            )
        except (AttributeError, TypeError, ValueError):
            return None
