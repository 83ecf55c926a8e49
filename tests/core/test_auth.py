"""Tests for AuthHeaderInjector."""

import logging

import pytest

from release_auth.core.auth import AuthHeaderInjector
from release_auth.core.classifier import URLClassifier
from release_auth.domain import (
    Credentials,
    RepositoryAllowList,
    TransportOptions,
)
from tests.fakes import ASSET_URL, BROWSER_URL


@pytest.fixture
def classifier(allow_list: RepositoryAllowList) -> URLClassifier:
    return URLClassifier(allow_list)


@pytest.fixture
def injector(credentials: Credentials) -> AuthHeaderInjector:
    return AuthHeaderInjector(credentials)


def test_unmatched_url_returns_same_options(
    classifier: URLClassifier, injector: AuthHeaderInjector
) -> None:
    """Test options of unlisted URLs come back untouched."""
    url = "https://github.com/other/repo/releases/download/v1/app.zip"
    options = TransportOptions(headers=("Accept: */*",))

    assert injector.inject(url, classifier.classify(url), options) is options


def test_empty_allow_list_injects_nothing(
    injector: AuthHeaderInjector,
) -> None:
    """Test an empty allow-list leaves every request unauthenticated."""
    classifier = URLClassifier(RepositoryAllowList())
    options = TransportOptions()

    result = injector.inject(
        BROWSER_URL, classifier.classify(BROWSER_URL), options
    )
    assert result is options


def test_token_added_once(
    classifier: URLClassifier, injector: AuthHeaderInjector
) -> None:
    """Test exactly one token header, even when injecting twice."""
    classification = classifier.classify(ASSET_URL)

    once = injector.inject(ASSET_URL, classification, TransportOptions())
    twice = injector.inject(ASSET_URL, classification, once)

    assert once.headers.count("Authorization: token ghp_secret") == 1
    assert twice.headers == once.headers
    assert once.follow_redirects is True
    assert once.max_redirects == 5  # noqa: PLR2004


def test_existing_header_with_other_spacing_not_duplicated(
    classifier: URLClassifier, injector: AuthHeaderInjector
) -> None:
    """Test a caller supplied token header is recognised."""
    options = TransportOptions(headers=("authorization:token ghp_secret",))

    result = injector.inject(
        ASSET_URL, classifier.classify(ASSET_URL), options
    )

    assert result.headers == ("authorization: token ghp_secret",)


def test_basic_auth_independent_of_host(
    classifier: URLClassifier,
) -> None:
    """Test basic auth is attached for matched non-GitHub hosts."""
    injector = AuthHeaderInjector(
        Credentials(github_token="tok", basic_auth=("user", "pass"))
    )
    url = "https://mirror.example.com/acme/widgets/dist/1.0/app.zip"

    result = injector.inject(url, classifier.classify(url), TransportOptions())

    assert result.headers == ("Authorization: Basic dXNlcjpwYXNz",)


def test_token_and_basic_on_github(classifier: URLClassifier) -> None:
    """Test both credential kinds are applied to GitHub hosts."""
    injector = AuthHeaderInjector(
        Credentials(github_token="tok", basic_auth=("user", "pass"))
    )

    result = injector.inject(
        ASSET_URL, classifier.classify(ASSET_URL), TransportOptions()
    )

    assert result.headers == (
        "Authorization: token tok",
        "Authorization: Basic dXNlcjpwYXNz",
    )


def test_accept_replaces_existing(
    classifier: URLClassifier, injector: AuthHeaderInjector
) -> None:
    """Test the accept override replaces any Accept header."""
    options = TransportOptions(headers=("Accept: application/json",))

    result = injector.inject(
        ASSET_URL,
        classifier.classify(ASSET_URL),
        options,
        accept="application/octet-stream",
    )

    assert result.headers == (
        "Authorization: token ghp_secret",
        "Accept: application/octet-stream",
    )


def test_caller_redirect_choice_kept(
    classifier: URLClassifier, injector: AuthHeaderInjector
) -> None:
    """Test explicit follow/max redirect settings are not overridden."""
    options = TransportOptions(follow_redirects=False, max_redirects=2)

    result = injector.inject(
        ASSET_URL, classifier.classify(ASSET_URL), options
    )

    assert result.follow_redirects is False
    assert result.max_redirects == 2  # noqa: PLR2004


def test_no_credentials_configured(classifier: URLClassifier) -> None:
    """Test matched URLs without credentials only get redirect defaults."""
    injector = AuthHeaderInjector(Credentials())

    result = injector.inject(
        ASSET_URL, classifier.classify(ASSET_URL), TransportOptions()
    )

    assert result.headers == ()
    assert result.follow_redirects is True


def test_token_never_logged(
    classifier: URLClassifier,
    injector: AuthHeaderInjector,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test debug logging masks the credential."""
    caplog.set_level(logging.DEBUG, logger="release_auth")

    injector.inject(
        ASSET_URL, classifier.classify(ASSET_URL), TransportOptions()
    )

    assert "ghp_secret" not in caplog.text
    assert "token ***" in caplog.text
