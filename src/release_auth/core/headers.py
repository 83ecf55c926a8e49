"""Helpers for ``"Name: value"`` header lists.

The host transport keeps headers as an ordered list of raw header lines,
so several ``Authorization`` lines can coexist (token and basic auth are
applied independently). These helpers keep that list form and convert it
to a case-insensitive multidict only at the aiohttp boundary.
"""

from collections.abc import Iterable

from multidict import CIMultiDict

from release_auth.constants import MASKED_VALUE

AUTHORIZATION = "authorization"


def split_header(header: str) -> tuple[str, str]:
    """Split a raw header line into ``(name, value)``."""
    name, _, value = header.partition(":")
    return name.strip(), value.strip()


def normalize_header(header: str) -> str:
    """Return ``"Name: value"`` with surrounding whitespace removed."""
    name, value = split_header(header)
    return f"{name}: {value}"


def header_name(header: str) -> str:
    return split_header(header)[0].casefold()


def has_header(headers: Iterable[str], header: str) -> bool:
    """Return True if ``header`` is present (case-insensitive name)."""
    name, value = split_header(header)
    return any(
        existing_name.casefold() == name.casefold() and existing_value == value
        for existing_name, existing_value in map(split_header, headers)
    )


def without_header(headers: Iterable[str], name: str) -> tuple[str, ...]:
    """Return ``headers`` minus every line called ``name``."""
    wanted = name.casefold()
    return tuple(h for h in headers if header_name(h) != wanted)


def to_multidict(headers: Iterable[str]) -> CIMultiDict[str]:
    """Convert raw header lines into the mapping aiohttp expects."""
    result: CIMultiDict[str] = CIMultiDict()
    for header in headers:
        name, value = split_header(header)
        if name:
            result.add(name, value)
    return result


def mask_headers(headers: Iterable[str]) -> list[str]:
    """Return headers safe for logging, with credential values hidden.

    ``Authorization: token abc`` becomes ``Authorization: token ***``.
    """
    masked = []
    for header in headers:
        name, value = split_header(header)
        if name.casefold() == AUTHORIZATION:
            scheme = value.split(" ", 1)[0] if " " in value else ""
            value = f"{scheme} {MASKED_VALUE}".strip()
        masked.append(f"{name}: {value}")
    return masked
