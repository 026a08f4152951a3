"""Resolve account/project queries and turn analytics payloads into charts."""

from .client import AnalyticsClient, FetchResult
from .identifiers import AccountRef, ProjectRef, QueryKind, parse_url
from .normalizer import normalize
from .resolver import SearchMode, resolve_query

__version__ = "0.1.0"

__all__ = [
    "AccountRef",
    "AnalyticsClient",
    "FetchResult",
    "ProjectRef",
    "QueryKind",
    "SearchMode",
    "normalize",
    "parse_url",
    "resolve_query",
]
