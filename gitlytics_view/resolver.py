"""
Turn whatever the user typed into exactly one QueryRef.

The same raw text can be a username or a half-entered owner/repository pair.
Misuse across search modes is reported with a specific message instead of
letting the request reach the backend and come back as "not found".
"""

from __future__ import annotations

import enum
from typing import Mapping, Optional

from .errors import CrossModeMisuse, MalformedUrl, ValidationError
from .identifiers import AccountRef, ProjectRef, QueryRef, parse_url


class SearchMode(str, enum.Enum):
    ACCOUNT = "account"
    PROJECT = "project"
    URL = "url"

    @classmethod
    def coerce(cls, value: object) -> "SearchMode":
        # "user"/"repository" are the names the search page historically used
        aliases = {"user": cls.ACCOUNT, "repository": cls.PROJECT, "repo": cls.PROJECT}
        if isinstance(value, SearchMode):
            return value
        key = str(value or "").strip().lower()
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ValidationError(f"Unknown search mode '{value}'.", title="Invalid Search") from None


def _field(fields: Mapping[str, Optional[str]], name: str) -> str:
    return (fields.get(name) or "").strip()


def _looks_like_url(text: str) -> bool:
    lowered = text.lower()
    return lowered.startswith("https://") or lowered.startswith("http://")


def resolve_account(username: str) -> AccountRef:
    if not username:
        raise ValidationError("Please enter a GitHub username.", title="Input Required")
    if "/" in username and not _looks_like_url(username):
        raise CrossModeMisuse(expected="project")
    return AccountRef(username)


def resolve_project(owner: str, project: str) -> ProjectRef:
    if owner and not project:
        if "/" not in owner:
            raise CrossModeMisuse(expected="account")
        # "owner/repo" typed into the owner field
        parts = owner.split("/")
        if len(parts) == 2 and all(parts):
            owner, project = parts
    if not owner or not project:
        raise ValidationError(
            "Please enter both repository owner and repository name.",
            title="Input Required",
        )
    return ProjectRef(owner, project)


def resolve_url(url: str, host: str = "github.com") -> QueryRef:
    if not url:
        raise ValidationError("Please enter a GitHub URL.", title="Input Required")
    ref = parse_url(url, host=host)
    if ref is None:
        raise MalformedUrl(url, host=host)
    return ref


def resolve_query(mode: object, fields: Mapping[str, Optional[str]], *, host: str = "github.com") -> QueryRef:
    """
    Resolve one submission.

    fields holds the raw form values: "username" for account search,
    "owner" and "repo" for project search, "url" for URL search. Raises a
    ValidationError, CrossModeMisuse or MalformedUrl; never performs I/O.
    """
    search_mode = SearchMode.coerce(mode)
    if search_mode is SearchMode.ACCOUNT:
        return resolve_account(_field(fields, "username"))
    if search_mode is SearchMode.PROJECT:
        return resolve_project(_field(fields, "owner"), _field(fields, "repo"))
    return resolve_url(_field(fields, "url"), host=host)
