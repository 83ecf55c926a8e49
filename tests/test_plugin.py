"""Tests for the host integration hook."""

import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from release_auth import AuthenticatedDownloadPlugin, PreFileDownloadEvent
from release_auth.core.repository import AuthenticatedRepository
from release_auth.core.transport import AiohttpTransport
from release_auth.domain import Credentials, TransferResult
from tests.fakes import (
    ASSET_URL,
    BROWSER_URL,
    RELEASE_JSON,
    RELEASE_URL,
    FakeResponse,
    FakeSession,
)

EXTRA = {
    "composer-authenticated-plugin": {
        "repositories": [
            {
                "url": "https://packages.acme.test/packages.json",
                "owner": "acme",
                "name": "widgets",
            },
            {"owner": "acme", "name": "gadgets"},
            {"url": "https://broken.test", "owner": "acme"},
        ]
    }
}
HOST_CONFIG = {
    "github-oauth": {"github.com": "ghp_secret"},
    "http-basic": {},
}


@pytest.fixture
def plugin(session: FakeSession) -> AuthenticatedDownloadPlugin:
    plugin = AuthenticatedDownloadPlugin()
    plugin.activate(EXTRA, HOST_CONFIG, session)
    return plugin


def test_activate_builds_engine(plugin: AuthenticatedDownloadPlugin) -> None:
    """Test activation loads rules, credentials and a default transport."""
    assert len(plugin.allow_list) == 2  # noqa: PLR2004
    assert len(plugin.config_errors) == 1
    assert plugin.engine.credentials.github_token == "ghp_secret"
    assert isinstance(plugin.engine.transport, AiohttpTransport)


def test_activate_uses_host_transport(session: FakeSession) -> None:
    """Test a supplied host transport is used."""
    transport = AsyncMock()
    plugin = AuthenticatedDownloadPlugin()

    engine = plugin.activate(EXTRA, HOST_CONFIG, session, transport=transport)

    assert engine.transport is transport


def test_activate_settings(session: FakeSession) -> None:
    """Test settings reach the engine."""
    settings = {
        "log_level": "INFO",
        "console_log_level": "WARNING",
        "network": {"timeout_seconds": 3, "transfer_timeout_minutes": 1},
        "auth": {"forward_auth_on_redirect": True},
    }

    engine = AuthenticatedDownloadPlugin().activate(
        EXTRA, HOST_CONFIG, session, settings=settings
    )

    assert engine.timeout_seconds == 3  # noqa: PLR2004
    assert engine.forward_auth is True


def test_activate_reads_settings_file(
    session: FakeSession, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test settings.conf values reach the engine when none are passed."""
    monkeypatch.setenv("RELEASE_AUTH_CONFIG_DIR", str(tmp_path))
    (tmp_path / "settings.conf").write_text(
        "[network]\n"
        "timeout_seconds = 42\n"
        "transfer_timeout_minutes = 9\n"
        "[auth]\n"
        "forward_auth_on_redirect = true\n"
    )
    plugin = AuthenticatedDownloadPlugin()

    engine = plugin.activate(EXTRA, HOST_CONFIG, session)

    assert engine.timeout_seconds == 42  # noqa: PLR2004
    assert engine.transfer_timeout_minutes == 9  # noqa: PLR2004
    assert engine.forward_auth is True
    assert engine.transport.forward_auth is True
    repository_engine = plugin.repositories()[0].engine
    assert repository_engine.timeout_seconds == 42  # noqa: PLR2004


def test_activate_warns_without_credentials(
    session: FakeSession, caplog: pytest.LogCaptureFixture
) -> None:
    """Test activation reports a configuration without credentials."""
    caplog.set_level(logging.WARNING)

    AuthenticatedDownloadPlugin().activate(EXTRA, {}, session)

    assert "No credentials configured" in caplog.text


def test_engine_requires_activation() -> None:
    """Test using the plugin before activation fails clearly."""
    with pytest.raises(RuntimeError, match="not activated"):
        _ = AuthenticatedDownloadPlugin().engine


def test_activate_falls_back_to_token_store(session: FakeSession) -> None:
    """Test the keyring token is used without a github-oauth entry."""
    store = MagicMock()
    store.get.return_value = "from-keyring"

    engine = AuthenticatedDownloadPlugin().activate(
        EXTRA, {}, session, token_store=store
    )

    assert engine.credentials.github_token == "from-keyring"


@pytest.mark.asyncio
async def test_hook_rewrites_browser_link(
    plugin: AuthenticatedDownloadPlugin, session: FakeSession
) -> None:
    """Test the hook rewrites the URL and merges authenticated options."""
    session.add("GET", RELEASE_URL, FakeResponse(body=RELEASE_JSON))
    event = PreFileDownloadEvent(
        processed_url=BROWSER_URL,
        transport_options={"ssl": {"verify_peer": True}},
    )

    await plugin.on_pre_file_download(event)

    assert event.processed_url == ASSET_URL
    assert event.transport_options["ssl"] == {"verify_peer": True}
    assert event.transport_options["http"]["header"] == [
        "Authorization: token ghp_secret",
        "Accept: application/octet-stream",
    ]
    assert event.transport_options["http"]["follow_location"] == 1
    assert event.transport_options["http"]["max_redirects"] == 5  # noqa: PLR2004
    assert event.context_options is None


@pytest.mark.asyncio
async def test_hook_replaces_package_context_options(
    plugin: AuthenticatedDownloadPlugin,
) -> None:
    """Test a package context receives the authenticated options."""
    event = PreFileDownloadEvent(
        processed_url=ASSET_URL,
        transport_options={"http": {"timeout": 60}},
        context_options={"http": {"header": ["X-Package: 1"]}},
    )

    await plugin.on_pre_file_download(event)

    expected_headers = [
        "X-Package: 1",
        "Authorization: token ghp_secret",
        "Accept: application/octet-stream",
    ]
    assert event.context_options["http"]["header"] == expected_headers
    assert event.transport_options["http"]["header"] == expected_headers
    assert event.transport_options["http"]["timeout"] == 60  # noqa: PLR2004


@pytest.mark.asyncio
async def test_hook_ignores_unlisted_urls(
    plugin: AuthenticatedDownloadPlugin, session: FakeSession
) -> None:
    """Test events for other repositories are left alone."""
    options = {"http": {"header": ["Accept: */*"]}}
    event = PreFileDownloadEvent(
        processed_url="https://github.com/other/repo/releases/download/v1/a",
        transport_options=options,
    )

    await plugin.on_pre_file_download(event)

    assert event.transport_options is options
    assert session.calls == []


def test_repositories_for_rules_with_url(
    plugin: AuthenticatedDownloadPlugin,
) -> None:
    """Test one repository is exposed per rule with a source URL."""
    repositories = plugin.repositories()

    assert len(repositories) == 1
    assert isinstance(repositories[0], AuthenticatedRepository)
    assert repositories[0].url == "https://packages.acme.test/packages.json"


@pytest.mark.asyncio
async def test_repository_index_through_host_transport(
    session: FakeSession,
) -> None:
    """Test index fetches use the host transport with basic auth."""
    transport = AsyncMock()
    transport.get.return_value = TransferResult(
        "https://packages.acme.test/packages.json",
        200,
        b'{"packages": {"acme/widgets": {}}}',
    )
    host_config = {
        "http-basic": {
            "packages.acme.test": {"username": "acme", "password": "pw"}
        }
    }
    plugin = AuthenticatedDownloadPlugin()
    plugin.activate(EXTRA, host_config, session, transport=transport)

    index = await plugin.repositories()[0].fetch_index()

    assert index == {"packages": {"acme/widgets": {}}}
    url, options = transport.get.await_args.args
    assert url == "https://packages.acme.test/packages.json"
    basic = Credentials(basic_auth=("acme", "pw")).basic_auth_header()
    assert options.headers == (basic,)


def test_repository_uses_credentials_for_its_host(
    session: FakeSession,
) -> None:
    """Test each repository uses the credentials of its URL's host."""
    host_config = {
        "github-oauth": {"packages.acme.test": "ghp_repo"},
        "http-basic": {
            "other.test": {"username": "other", "password": "x"},
            "packages.acme.test": {"username": "acme", "password": "pw"},
        },
    }
    plugin = AuthenticatedDownloadPlugin()
    plugin.activate(EXTRA, host_config, session)

    engine = plugin.repositories()[0].engine

    assert engine.credentials.github_token == "ghp_repo"
    assert engine.credentials.basic_auth == ("acme", "pw")
    assert [r.display_name for r in engine.allow_list] == ["acme/widgets"]
    assert plugin.engine.credentials.basic_auth == ("other", "x")


def test_repository_without_credentials_logs_error(
    session: FakeSession, caplog: pytest.LogCaptureFixture
) -> None:
    """Test a repository whose host has no credentials is reported."""
    caplog.set_level(logging.ERROR)
    plugin = AuthenticatedDownloadPlugin()
    plugin.activate(EXTRA, {}, session)

    plugin.repositories()

    assert "Authorization is empty for acme/widgets" in caplog.text


def test_repositories_before_activation_is_empty() -> None:
    """Test an inactive plugin exposes no repositories."""
    assert AuthenticatedDownloadPlugin().repositories() == []
