"""Tests for SettingsManager and Paths."""

import logging
from pathlib import Path

import pytest

from release_auth.config import Paths, SettingsManager


@pytest.fixture
def manager(tmp_path: Path) -> SettingsManager:
    return SettingsManager(config_dir=tmp_path)


def test_defaults_when_file_missing(manager: SettingsManager) -> None:
    """Test defaults are returned and no file is created."""
    settings = manager.load_settings()

    assert settings == manager.get_default_settings()
    assert settings["network"]["timeout_seconds"] == 10  # noqa: PLR2004
    assert settings["network"]["transfer_timeout_minutes"] == 5  # noqa: PLR2004
    assert settings["auth"]["forward_auth_on_redirect"] is False
    assert not manager.settings_file.exists()


def test_load_values_from_file(manager: SettingsManager) -> None:
    """Test values in the INI file override defaults."""
    manager.settings_file.write_text(
        "[DEFAULT]\n"
        "log_level = debug\n"
        "console_log_level = ERROR  # quiet\n"
        "\n"
        "[network]\n"
        "timeout_seconds = 30\n"
        "transfer_timeout_minutes = 15\n"
        "\n"
        "[auth]\n"
        "forward_auth_on_redirect = yes\n"
    )

    settings = manager.load_settings()

    assert settings["log_level"] == "DEBUG"
    assert settings["console_log_level"] == "ERROR"
    assert settings["network"]["timeout_seconds"] == 30  # noqa: PLR2004
    assert settings["network"]["transfer_timeout_minutes"] == 15  # noqa: PLR2004
    assert settings["auth"]["forward_auth_on_redirect"] is True


def test_invalid_values_fall_back(
    manager: SettingsManager, caplog: pytest.LogCaptureFixture
) -> None:
    """Test invalid values are replaced by defaults with a warning."""
    caplog.set_level(logging.WARNING)
    manager.settings_file.write_text(
        "[DEFAULT]\n"
        "log_level = LOUD\n"
        "[network]\n"
        "timeout_seconds = soon\n"
        "transfer_timeout_minutes = -1\n"
        "[auth]\n"
        "forward_auth_on_redirect = maybe\n"
    )

    settings = manager.load_settings()

    assert settings == manager.get_default_settings()
    assert "Invalid log level 'LOUD'" in caplog.text
    assert "Invalid timeout_seconds 'soon'" in caplog.text
    assert "Invalid forward_auth_on_redirect value" in caplog.text


def test_save_and_reload(manager: SettingsManager) -> None:
    """Test saved settings load back unchanged."""
    settings = manager.get_default_settings()
    settings["network"]["timeout_seconds"] = 42
    settings["auth"]["forward_auth_on_redirect"] = True

    manager.save_settings(settings)

    assert manager.load_settings() == settings
    assert "forward_auth_on_redirect = true" in (
        manager.settings_file.read_text()
    )


def test_config_dir_env_override(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Test RELEASE_AUTH_CONFIG_DIR relocates the configuration."""
    monkeypatch.setenv("RELEASE_AUTH_CONFIG_DIR", str(tmp_path))

    assert Paths.config_dir() == tmp_path
    assert SettingsManager().settings_file == tmp_path / "settings.conf"


def test_config_dir_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the default directory lives under ~/.config."""
    monkeypatch.delenv("RELEASE_AUTH_CONFIG_DIR", raising=False)
    assert Paths.config_dir() == Path.home() / ".config" / "release-auth"
