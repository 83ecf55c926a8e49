"""Tests for AuthenticatedRepository."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from release_auth.core.repository import AuthenticatedRepository
from release_auth.domain import (
    RepositoryRule,
    TransferResult,
    TransportOptions,
)
from release_auth.exceptions import ConfigurationError, TransferError

INDEX_URL = "https://packages.acme.test/packages.json"
SOURCE_OPTIONS = TransportOptions(headers=("Authorization: Basic dTpw",))


def _engine(body: bytes | Path) -> MagicMock:
    engine = MagicMock()
    engine.authenticate_source.return_value = SOURCE_OPTIONS
    engine.retrieve_passthrough = AsyncMock(
        return_value=TransferResult(INDEX_URL, 200, body)
    )
    return engine


@pytest.mark.asyncio
async def test_fetch_index(rule: RepositoryRule) -> None:
    """Test the index is fetched through the passthrough path."""
    engine = _engine(b'{"packages": []}')

    index = await AuthenticatedRepository(rule, engine).fetch_index()

    assert index == {"packages": []}
    engine.authenticate_source.assert_called_once_with(INDEX_URL, rule)
    engine.retrieve_passthrough.assert_awaited_once_with(
        INDEX_URL, SOURCE_OPTIONS
    )


@pytest.mark.asyncio
async def test_fetch_index_from_file_result(
    rule: RepositoryRule, tmp_path: Path
) -> None:
    """Test file-backed transfer results are read from disk."""
    body = tmp_path / "packages.json"
    body.write_bytes(b'{"packages": {}}')

    index = await AuthenticatedRepository(rule, _engine(body)).fetch_index()

    assert index == {"packages": {}}


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"<html>", b"[1, 2]"])
async def test_fetch_index_invalid(rule: RepositoryRule, body: bytes) -> None:
    """Test bodies that are not a JSON object raise TransferError."""
    with pytest.raises(TransferError):
        await AuthenticatedRepository(rule, _engine(body)).fetch_index()


@pytest.mark.asyncio
async def test_fetch_index_requires_url() -> None:
    """Test a rule without source URL cannot be fetched."""
    repository = AuthenticatedRepository(
        RepositoryRule("acme", "widgets"), _engine(b"{}")
    )

    with pytest.raises(ConfigurationError, match="no `url`"):
        await repository.fetch_index()
    assert "acme/widgets" in repr(repository)
