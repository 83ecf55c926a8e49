"""Pytest configuration and fixtures for release-auth tests."""

import logging
import os
import tempfile
from pathlib import Path

import pytest

# Keep logs and settings out of the user's home before the package is
# imported (the first get_logger() call opens the log file).
_TEST_HOME = Path(tempfile.mkdtemp(prefix="release-auth-tests-"))
os.environ.setdefault("RELEASE_AUTH_LOG_DIR", str(_TEST_HOME / "logs"))
os.environ.setdefault("RELEASE_AUTH_CONFIG_DIR", str(_TEST_HOME / "config"))

from release_auth.domain import (  # noqa: E402
    Credentials,
    RepositoryAllowList,
    RepositoryRule,
)
from tests.fakes import FakeSession  # noqa: E402


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("release_auth"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture
def rule() -> RepositoryRule:
    return RepositoryRule(
        owner="acme",
        name="widgets",
        source_url="https://packages.acme.test/packages.json",
    )


@pytest.fixture
def allow_list(rule: RepositoryRule) -> RepositoryAllowList:
    return RepositoryAllowList([rule])


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(github_token="ghp_secret")


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
