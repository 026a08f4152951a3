"""Unit tests for identifier validation and URL parsing."""

from __future__ import annotations

import pytest

from gitlytics_view.errors import ValidationError
from gitlytics_view.identifiers import (
    AccountRef,
    ProjectRef,
    QueryKind,
    parse_url,
    validate_account_name,
    validate_project_name,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Validator


@pytest.mark.parametrize("name", ["a", "acme", "Acme-Corp", "a1-b2-c3", "x" * 39, "0day"])
def test_account_name_accepts_valid_logins(name: str) -> None:
    assert validate_account_name(name) == name


@pytest.mark.parametrize(
    "name",
    ["", "-acme", "acme-", "ac_me", "ac.me", "ac me", "acme/widget", "x" * 40, "ümlaut", "acme\n"],
)
def test_account_name_rejects_invalid_logins(name: str) -> None:
    with pytest.raises(ValidationError):
        validate_account_name(name)


def test_account_name_errors_are_specific() -> None:
    with pytest.raises(ValidationError) as empty:
        validate_account_name("")
    assert empty.value.title == "Input Required"

    with pytest.raises(ValidationError) as long:
        validate_account_name("x" * 40)
    assert "39" in long.value.message

    with pytest.raises(ValidationError) as owner:
        validate_account_name("bad_owner", role="owner")
    assert owner.value.title == "Invalid Owner"


@pytest.mark.parametrize("name", ["widget", "my.repo", "my_repo", "-dash-", ".github", "x" * 100])
def test_project_name_accepts_valid_names(name: str) -> None:
    assert validate_project_name(name) == name


@pytest.mark.parametrize("name", ["", "x" * 101, "has space", "slash/name", "emoji✓"])
def test_project_name_rejects_invalid_names(name: str) -> None:
    with pytest.raises(ValidationError):
        validate_project_name(name)


def test_refs_validate_on_construction() -> None:
    assert AccountRef("acme").kind is QueryKind.ACCOUNT
    assert ProjectRef("acme", "widget").identifier == "acme/widget"
    with pytest.raises(ValidationError):
        AccountRef("-bad")
    with pytest.raises(ValidationError):
        ProjectRef("acme", "bad name")


# ---------------------------------------------------------------------------
# URL parser


def test_parse_account_url() -> None:
    assert parse_url("https://github.com/acme") == AccountRef("acme")


def test_parse_project_url() -> None:
    assert parse_url("https://github.com/acme/widget") == ProjectRef("acme", "widget")


def test_parse_strips_one_trailing_slash() -> None:
    assert parse_url("https://github.com/acme/widget/") == ProjectRef("acme", "widget")
    assert parse_url("http://github.com/acme/") == AccountRef("acme")


def test_parse_ignores_deeper_paths_and_query() -> None:
    assert parse_url("https://github.com/acme/widget/tree/main") == ProjectRef("acme", "widget")
    assert parse_url("https://github.com/acme?tab=repositories") == AccountRef("acme")


def test_parse_uses_configured_host() -> None:
    assert parse_url("https://host/acme", host="host") == AccountRef("acme")
    assert parse_url("https://host/acme/widget", host="host") == ProjectRef("acme", "widget")
    assert parse_url("https://github.com/acme", host="host") is None


@pytest.mark.parametrize(
    "url",
    [
        "not a url",
        "",
        "ftp://github.com/acme",
        "https://gitlab.com/acme",
        "https://github.com/",
        "https://github.com",
        "github.com/acme",
        "https://github.com/-bad-",
        "https://github.com/acme/bad%20name",
    ],
)
def test_parse_invalid_inputs_return_none(url: str) -> None:
    assert parse_url(url) is None


def test_parse_never_raises_on_non_strings() -> None:
    assert parse_url(None) is None  # type: ignore[arg-type]
