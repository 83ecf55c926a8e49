"""Tests for TransportOptions, TransferResult and Credentials."""

from pathlib import Path

from release_auth.domain import Credentials, TransferResult, TransportOptions


def test_from_mapping_reads_host_options() -> None:
    """Test from_mapping parses the nested http options."""
    options = TransportOptions.from_mapping(
        {
            "http": {
                "header": ["Accept: */*", ""],
                "follow_location": 0,
                "max_redirects": 3,
                "timeout": 30,
            }
        }
    )

    assert options.headers == ("Accept: */*",)
    assert options.follow_redirects is False
    assert options.max_redirects == 3  # noqa: PLR2004
    assert options.timeout == 30.0  # noqa: PLR2004


def test_from_mapping_accepts_string_header_block() -> None:
    """Test a newline separated header string is split into lines."""
    options = TransportOptions.from_mapping(
        {"http": {"header": "Accept: */*\r\nX-Trace: 1"}}
    )
    assert options.headers == ("Accept: */*", "X-Trace: 1")


def test_from_mapping_empty() -> None:
    """Test missing options give unspecified defaults."""
    options = TransportOptions.from_mapping(None)
    assert options == TransportOptions()
    assert options.follow_redirects is None


def test_to_mapping_preserves_unknown_keys() -> None:
    """Test to_mapping merges into the base without mutating it."""
    base = {"http": {"method": "GET"}, "ssl": {"verify_peer": True}}
    options = TransportOptions(
        headers=("Authorization: token x",),
        follow_redirects=True,
        max_redirects=5,
    )

    result = options.to_mapping(base)

    assert result["http"] == {
        "method": "GET",
        "header": ["Authorization: token x"],
        "follow_location": 1,
        "max_redirects": 5,
    }
    assert result["ssl"] == {"verify_peer": True}
    assert base == {"http": {"method": "GET"}, "ssl": {"verify_peer": True}}


def test_transfer_result_path() -> None:
    """Test path is only set for file transfers."""
    assert TransferResult("u", 200, b"body").path is None
    result = TransferResult("u", 200, Path("/tmp/x"), 4)
    assert result.path == Path("/tmp/x")


def test_credentials_headers() -> None:
    """Test token and basic headers are rendered independently."""
    creds = Credentials(github_token="abc", basic_auth=("user", "pass"))

    assert creds.token_header() == "Authorization: token abc"
    assert creds.basic_auth_header() == "Authorization: Basic dXNlcjpwYXNz"


def test_credentials_repr_hides_secrets() -> None:
    """Test repr never shows the credential values."""
    creds = Credentials(github_token="abc", basic_auth=("user", "pass"))
    text = repr(creds)
    assert "abc" not in text
    assert "pass" not in text
    assert Credentials().token_header() is None
    assert Credentials().basic_auth_header() is None
