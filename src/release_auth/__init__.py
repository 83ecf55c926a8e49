"""Top-level package for release-auth.

Authenticated download of GitHub release assets for a package manager.
"""

from importlib.metadata import PackageNotFoundError, version

from release_auth.core.transfer import TransferEngine
from release_auth.plugin import (
    AuthenticatedDownloadPlugin,
    PreFileDownloadEvent,
)

try:
    __version__ = version("release-auth")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "AuthenticatedDownloadPlugin",
    "PreFileDownloadEvent",
    "TransferEngine",
    "__version__",
]
