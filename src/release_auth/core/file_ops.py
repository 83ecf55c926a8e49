"""Destination file helpers used by the transfer paths."""

from __future__ import annotations

import contextlib
from pathlib import Path

import aiofiles
import aiohttp

from release_auth.constants import CHUNK_SIZE, PARTIAL_SUFFIX
from release_auth.exceptions import IntegrityError
from release_auth.logger import get_logger

logger = get_logger(__name__)


async def stream_to_file(response: aiohttp.ClientResponse, dest: Path) -> int:
    """Stream a response body to ``dest``.

    Parent directories are created as needed.

    Args:
        response: Open HTTP response
        dest: Destination path

    Returns:
        Number of bytes written

    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    async with aiofiles.open(dest, mode="wb") as f:
        async for chunk in response.content.iter_chunked(CHUNK_SIZE):
            if chunk:
                await f.write(chunk)
                written += len(chunk)
    logger.debug("Wrote %s bytes to %s", f"{written:,}", dest)
    return written


def partial_path(dest: Path) -> Path:
    """Sibling file a download is streamed into before it is committed."""
    return dest.with_name(f"{dest.name}{PARTIAL_SUFFIX}")


def commit_download(part: Path, dest: Path) -> None:
    """Move a verified download over ``dest``."""
    part.replace(dest)
    logger.debug("Committed %s", dest)


def remove_partial(dest: Path) -> None:
    """Delete a partially written destination file, if any."""
    if dest.exists():
        logger.debug("Removing partial download: %s", dest)
        with contextlib.suppress(OSError):
            dest.unlink()


def verify_download(dest: Path) -> int:
    """Check that a transfer left a non-empty file at ``dest``.

    Returns:
        File size in bytes

    Raises:
        IntegrityError: If the file is missing or empty

    """
    if not dest.is_file():
        msg = "destination file was not created"
        raise IntegrityError(msg, target=str(dest))
    size = dest.stat().st_size
    if size == 0:
        msg = "downloaded file is empty"
        raise IntegrityError(msg, target=str(dest))
    return size
