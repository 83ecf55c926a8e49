"""Domain models for release-auth."""

from release_auth.domain.rules import RepositoryAllowList, RepositoryRule
from release_auth.domain.transfer import (
    TransferRequest,
    TransferResult,
    TransportOptions,
)
from release_auth.domain.types import (
    AuthConfig,
    Credentials,
    GlobalConfig,
    NetworkConfig,
)

__all__ = [
    "AuthConfig",
    "Credentials",
    "GlobalConfig",
    "NetworkConfig",
    "RepositoryAllowList",
    "RepositoryRule",
    "TransferRequest",
    "TransferResult",
    "TransportOptions",
]
