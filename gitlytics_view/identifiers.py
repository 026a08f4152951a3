"""
Identifier parsing and validation.

A query is either an account (user or organization) or a project
(owner/repository). Both reference types validate their fields on
construction, so a QueryRef that exists is always well-formed.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Pattern, Union

from .errors import ValidationError

ACCOUNT_NAME_MAX = 39
PROJECT_NAME_MAX = 100

# GitHub allows alnum and hyphen for logins; no leading/trailing hyphen
ACCOUNT_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9-]{0,38}")
PROJECT_RE = re.compile(r"[A-Za-z0-9._-]{1,100}")


class QueryKind(str, enum.Enum):
    ACCOUNT = "account"
    PROJECT = "project"


# -----------------------------
# Validation
# -----------------------------
def validate_account_name(name: str, *, role: str = "account") -> str:
    """
    Check an account (or owner) login. Returns the name unchanged.
    """
    owner = role == "owner"
    if not name:
        raise ValidationError(
            "Please enter a repository owner." if owner else "Please enter a GitHub username.",
            title="Input Required",
        )
    if len(name) > ACCOUNT_NAME_MAX:
        raise ValidationError(
            f"Owner name cannot exceed {ACCOUNT_NAME_MAX} characters."
            if owner
            else f"GitHub usernames cannot be longer than {ACCOUNT_NAME_MAX} characters.",
            title="Invalid Owner" if owner else "Invalid Username",
        )
    if not ACCOUNT_RE.fullmatch(name) or name.endswith("-"):
        raise ValidationError(
            ("Owner name" if owner else "Username")
            + " can only contain alphanumeric characters and hyphens, and cannot start or end with a hyphen.",
            title="Invalid Owner" if owner else "Invalid Username",
        )
    return name


def validate_project_name(name: str) -> str:
    if not name:
        raise ValidationError("Please enter a repository name.", title="Input Required")
    if len(name) > PROJECT_NAME_MAX:
        raise ValidationError(
            f"Repository name cannot exceed {PROJECT_NAME_MAX} characters.",
            title="Invalid Repository Name",
        )
    if not PROJECT_RE.fullmatch(name):
        raise ValidationError(
            "Repository name can only contain alphanumeric characters, hyphens, underscores, and dots.",
            title="Invalid Repository Name",
        )
    return name


def is_valid_account_name(name: str) -> bool:
    try:
        validate_account_name(name)
    except ValidationError:
        return False
    return True


def is_valid_project_name(name: str) -> bool:
    try:
        validate_project_name(name)
    except ValidationError:
        return False
    return True


# -----------------------------
# Query references
# -----------------------------
@dataclass(frozen=True)
class AccountRef:
    name: str

    def __post_init__(self) -> None:
        validate_account_name(self.name)

    @property
    def kind(self) -> QueryKind:
        return QueryKind.ACCOUNT

    @property
    def identifier(self) -> str:
        return self.name


@dataclass(frozen=True)
class ProjectRef:
    owner: str
    name: str

    def __post_init__(self) -> None:
        validate_account_name(self.owner, role="owner")
        validate_project_name(self.name)

    @property
    def kind(self) -> QueryKind:
        return QueryKind.PROJECT

    @property
    def identifier(self) -> str:
        return f"{self.owner}/{self.name}"


QueryRef = Union[AccountRef, ProjectRef]


# -----------------------------
# URL parsing
# -----------------------------
@lru_cache(maxsize=8)
def _url_pattern(host: str) -> Pattern[str]:
    return re.compile(
        rf"^https?://{re.escape(host)}/([^/?#]+)(?:/([^/?#]+))?",
        re.IGNORECASE,
    )


def parse_url(url: str, host: str = "github.com") -> Optional[QueryRef]:
    """
    Parse a profile or repository URL.

    https://github.com/acme -> AccountRef("acme")
    https://github.com/acme/widget -> ProjectRef("acme", "widget")

    Anything else (wrong scheme or host, missing path, names that are not
    valid logins/repository names) yields None. Never raises.
    """
    if not isinstance(url, str):
        return None
    text = url.strip()
    if text.endswith("/"):
        text = text[:-1]

    match = _url_pattern(host).match(text)
    if not match:
        return None

    first, second = match.group(1), match.group(2)
    if second:
        if not (is_valid_account_name(first) and is_valid_project_name(second)):
            return None
        return ProjectRef(first, second)
    if not is_valid_account_name(first):
        return None
    return AccountRef(first)
