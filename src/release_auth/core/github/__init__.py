"""GitHub release asset resolution."""

from release_auth.core.github.models import BrowserReleaseLink, ReleaseAsset
from release_auth.core.github.resolver import AssetResolver

__all__ = ["AssetResolver", "BrowserReleaseLink", "ReleaseAsset"]
