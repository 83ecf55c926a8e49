"""Host transport protocol.

The host owns the actual downloader. The transfer engine only depends on
this interface so it can be driven by the host's implementation or by
:class:`release_auth.core.transport.AiohttpTransport` when running
stand-alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from release_auth.domain.transfer import TransferResult, TransportOptions


@runtime_checkable
class HostTransport(Protocol):
    """Interface of the host's downloader.

    Implementations raise :class:`release_auth.exceptions.TransferError`
    for transport-level failures so the engine can apply its single
    fallback hop.
    """

    async def get(
        self, url: str, options: TransportOptions
    ) -> TransferResult:
        """Fetch ``url`` and return the body in memory."""
        ...

    async def copy(
        self, url: str, destination: Path, options: TransportOptions
    ) -> TransferResult:
        """Fetch ``url`` and write the body to ``destination``."""
        ...
