"""Chart-ready types produced by the normalizer.

These are plain, frozen data containers. A ChartModel owns every value it
holds (strings, numbers, dates, tuples) and never points back into the raw
backend payload, so the payload can be dropped while charts stay on screen.

Absence is meaningful: a series that does not apply to the query kind, or
that the backend did not supply, is ``None``. Renderers are only invoked for
series that are present and non-empty.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .identifiers import QueryKind


@dataclass(frozen=True)
class Header:
    """Identity block shown above the metrics.

    Attributes:
        avatar_url: Avatar image for the account or the project owner.
        display_name: Account display name or ``owner/project``.
        description: Bio or project description, with a placeholder when empty.
        profile_url: Link to the account or project on the hosting site.
        created_label: e.g. ``"Joined Mar 4, 2015"``; None when unknown.
        updated_label: e.g. ``"Updated Jan 2, 2024"``; None when unknown.
    """

    avatar_url: Optional[str]
    display_name: str
    description: str
    profile_url: Optional[str]
    created_label: Optional[str]
    updated_label: Optional[str]


@dataclass(frozen=True)
class Metric:
    """One metric card. ``value`` is None when the backend did not report it."""

    label: str
    value: Optional[float]


@dataclass(frozen=True)
class LanguageSlice:
    """Share of one language (or file type).

    Attributes:
        category: Language or file-type name, unique within a series.
        percentage: Share as reported by the backend.
        approx_weight: Estimated code volume in bytes. This is an
            approximation derived from repository counts or project size,
            not a measured byte count. None when it cannot be estimated.
    """

    category: str
    percentage: float
    approx_weight: Optional[int]


@dataclass(frozen=True)
class CommitPoint:
    date: dt.date
    commits: int
    additions: Optional[int] = None
    deletions: Optional[int] = None


@dataclass(frozen=True)
class ContributorBar:
    name: str
    contribution_count: int


@dataclass(frozen=True)
class ProjectRow:
    name: str
    full_name: Optional[str]
    url: Optional[str]
    language: str
    stars: Optional[int]
    forks: Optional[int]
    commits: Optional[int]
    last_updated: Optional[str]


@dataclass(frozen=True)
class StatRow:
    label: str
    value: str


@dataclass(frozen=True)
class ChartModel:
    """Renderer-facing view of one analytics result."""

    kind: QueryKind
    header: Header
    metrics: Tuple[Metric, ...]
    language_series: Tuple[LanguageSlice, ...]
    commit_series: Optional[Tuple[CommitPoint, ...]] = None
    contributor_series: Optional[Tuple[ContributorBar, ...]] = None
    project_rows: Optional[Tuple[ProjectRow, ...]] = None
    commit_stat_rows: Optional[Tuple[StatRow, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        def rows(items: Optional[tuple]) -> Optional[list]:
            if items is None:
                return None
            return [dict(vars(item)) for item in items]

        commits = None
        if self.commit_series is not None:
            commits = [{**vars(p), "date": p.date.isoformat()} for p in self.commit_series]

        return {
            "kind": self.kind.value,
            "header": dict(vars(self.header)),
            "metrics": rows(self.metrics),
            "languageSeries": rows(self.language_series),
            "commitSeries": commits,
            "contributorSeries": rows(self.contributor_series),
            "projectRows": rows(self.project_rows),
            "commitStatRows": rows(self.commit_stat_rows),
        }
