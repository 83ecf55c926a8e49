"""Transport option and transfer request/result models."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from release_auth.constants import MAX_REDIRECTS


@dataclass(slots=True, frozen=True)
class TransportOptions:
    """Options the host transport applies to a single request.

    Headers are kept as ordered ``"Name: value"`` strings, the format the
    host's downloader consumes. ``None`` means "not specified by the
    caller" so defaults can be filled in without overriding explicit
    choices.

    Attributes:
        headers: Ordered request headers
        follow_redirects: Whether redirects are followed
        max_redirects: Maximum number of redirects to follow
        timeout: Per-request timeout in seconds

    """

    headers: tuple[str, ...] = ()
    follow_redirects: bool | None = None
    max_redirects: int | None = None
    timeout: float | None = None

    @classmethod
    def from_mapping(
        cls, options: Mapping[str, Any] | None
    ) -> TransportOptions:
        """Build options from the host's nested ``{"http": {...}}`` form.

        Args:
            options: Host transport options, e.g.
                ``{"http": {"header": [...], "follow_location": 1}}``

        Returns:
            Parsed transport options

        """
        http = dict((options or {}).get("http") or {})
        raw_headers = http.get("header") or ()
        if isinstance(raw_headers, str):
            raw_headers = raw_headers.splitlines()

        follow = http.get("follow_location")
        max_redirects = http.get("max_redirects")
        timeout = http.get("timeout")

        return cls(
            headers=tuple(h for h in raw_headers if h),
            follow_redirects=None if follow is None else bool(follow),
            max_redirects=(
                None if max_redirects is None else int(max_redirects)
            ),
            timeout=None if timeout is None else float(timeout),
        )

    def to_mapping(
        self, base: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Render options back into the host's nested form.

        Args:
            base: Host options to merge into; keys this model does not
                know about are preserved

        Returns:
            New mapping; ``base`` is not modified

        """
        result = dict(base or {})
        http = dict(result.get("http") or {})
        http["header"] = list(self.headers)
        if self.follow_redirects is not None:
            http["follow_location"] = 1 if self.follow_redirects else 0
        if self.max_redirects is not None:
            http["max_redirects"] = self.max_redirects
        if self.timeout is not None:
            http["timeout"] = self.timeout
        result["http"] = http
        return result

    def with_headers(self, headers: Iterable[str]) -> TransportOptions:
        return replace(self, headers=tuple(headers))


@dataclass(slots=True, frozen=True)
class TransferRequest:
    """A single direct transfer issued by the transfer engine.

    Attributes:
        url: Location to fetch
        destination: File the body is streamed to (None keeps it in memory)
        headers: Ordered request headers
        follow_redirects: Whether redirects are followed
        max_redirects: Redirect cap, fixed for GitHub asset resolution

    """

    url: str
    destination: Path | None = None
    headers: tuple[str, ...] = ()
    follow_redirects: bool = True
    max_redirects: int = MAX_REDIRECTS


@dataclass(slots=True)
class TransferResult:
    """Outcome of a transfer.

    Attributes:
        final_url: URL that produced the body after redirects
        status_code: HTTP status of the final response
        body: Response bytes, or the destination path for file transfers
        bytes_written: Size of the written file for file transfers

    """

    final_url: str
    status_code: int
    body: bytes | Path = field(default=b"", repr=False)
    bytes_written: int = 0

    @property
    def path(self) -> Path | None:
        return self.body if isinstance(self.body, Path) else None
