"""HTTP timeout utilities for release-auth.

The host owns the ``aiohttp.ClientSession``; these helpers build the
per-request timeouts applied to API hops and binary transfers.
"""

import aiohttp


def api_timeout(timeout_seconds: float) -> aiohttp.ClientTimeout:
    """Timeout applied to metadata and redirect-resolution hops."""
    return aiohttp.ClientTimeout(
        total=timeout_seconds * 3,
        sock_read=timeout_seconds * 2,
        sock_connect=timeout_seconds,
    )


def transfer_timeout(
    transfer_minutes: float, timeout_seconds: float
) -> aiohttp.ClientTimeout:
    """Timeout applied to a binary transfer."""
    return aiohttp.ClientTimeout(
        total=transfer_minutes * 60,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )
