"""
Payload normalization.

The backend answers account and project queries with two differently shaped
objects. All shape-specific field extraction lives here; everything
downstream only sees a ChartModel.
"""

from __future__ import annotations

import datetime as dt
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import MalformedData
from .formatting import format_date, parse_datetime
from .identifiers import QueryKind
from .model import (
    ChartModel,
    CommitPoint,
    ContributorBar,
    Header,
    LanguageSlice,
    Metric,
    ProjectRow,
    StatRow,
)

TOP_PROJECT_ROWS = 10

# The account payload has repository counts per language but no byte counts;
# each repository is counted as ~1000 bytes of that language.
BYTES_PER_REPOSITORY = 1000


# -----------------------------
# Field helpers
# -----------------------------
def _mapping(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def _items(v: Any) -> List[Any]:
    return v if isinstance(v, list) else []


def _text(v: Any) -> Optional[str]:
    if isinstance(v, str) and v.strip():
        return v.strip()
    return None


def _number(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        n = v
    elif isinstance(v, str):
        try:
            n = float(v)
        except ValueError:
            return None
    else:
        return None
    # NaN and infinities cannot become counts
    return n if math.isfinite(n) else None


def _int(v: Any) -> Optional[int]:
    n = _number(v)
    return None if n is None else int(n)


def _first_int(entry: Mapping[str, Any], *keys: str) -> Optional[int]:
    for k in keys:
        n = _int(entry.get(k))
        if n is not None:
            return n
    return None


def _round_half_up(x: float) -> int:
    return int(x + 0.5) if x >= 0 else -int(-x + 0.5)


def _label(prefix: str, value: Any) -> Optional[str]:
    d = format_date(value) if isinstance(value, str) else None
    return f"{prefix} {d}" if d else None


def _date(v: Any) -> Optional[dt.date]:
    parsed = parse_datetime(v) if isinstance(v, str) else None
    return parsed.date() if parsed else None


def _web_url(host: str, path: Optional[str]) -> Optional[str]:
    return f"https://{host}/{path}" if path else None


# -----------------------------
# Series builders
# -----------------------------
def _account_languages(breakdown: List[Any]) -> Tuple[LanguageSlice, ...]:
    series: List[LanguageSlice] = []
    seen = set()
    for entry in breakdown:
        entry = _mapping(entry)
        category = _text(entry.get("language"))
        percentage = _number(entry.get("percentage"))
        if not category or percentage is None or category in seen:
            continue
        seen.add(category)
        repo_count = _int(entry.get("repositoryCount"))
        weight = repo_count * BYTES_PER_REPOSITORY if repo_count is not None else None
        series.append(LanguageSlice(category, float(percentage), weight))
    return tuple(series)


def _project_languages(distribution: Dict[str, Any], size_kb: Optional[float]) -> Tuple[LanguageSlice, ...]:
    series: List[LanguageSlice] = []
    seen = set()
    for category, raw in distribution.items():
        category = _text(category)
        percentage = _number(raw)
        if not category or percentage is None or category in seen:
            continue
        seen.add(category)
        # Share of the repository size on disk, not a per-language byte count
        weight = None
        if size_kb is not None:
            share = percentage / 100 * size_kb * 1024
            weight = _round_half_up(share) if math.isfinite(share) else None
        series.append(LanguageSlice(category, float(percentage), weight))
    return tuple(series)


def _commit_series(timeline: List[Any]) -> Optional[Tuple[CommitPoint, ...]]:
    points: List[CommitPoint] = []
    for entry in timeline:
        entry = _mapping(entry)
        day = _date(entry.get("date"))
        commits = _int(entry.get("commits"))
        if day is None or commits is None:
            continue
        points.append(CommitPoint(day, commits, _int(entry.get("additions")), _int(entry.get("deletions"))))
    if not points:
        return None
    points.sort(key=lambda p: p.date)
    return tuple(points)


def _contributor_series(contributors: List[Any]) -> Optional[Tuple[ContributorBar, ...]]:
    bars: List[ContributorBar] = []
    for entry in contributors:
        entry = _mapping(entry)
        name = _text(entry.get("contributorName")) or _text(entry.get("username")) or _text(entry.get("name"))
        count = _first_int(entry, "contributionCount", "commitsCount", "commits", "contributions")
        if not name or count is None:
            continue
        bars.append(ContributorBar(name, count))
    return tuple(bars) or None


def _project_rows(repositories: List[Any], host: str) -> Optional[Tuple[ProjectRow, ...]]:
    rows: List[ProjectRow] = []
    for repo in repositories[:TOP_PROJECT_ROWS]:
        repo = _mapping(repo)
        full_name = _text(repo.get("fullName"))
        name = _text(repo.get("repoName")) or full_name
        if not name:
            continue
        rows.append(
            ProjectRow(
                name=name,
                full_name=full_name,
                url=_web_url(host, full_name),
                language=_text(repo.get("language")) or "N/A",
                stars=_int(repo.get("starsCount")),
                forks=_int(repo.get("forksCount")),
                commits=_int(repo.get("commitsCount")),
                last_updated=format_date(repo.get("lastPushAt")),
            )
        )
    return tuple(rows) or None


def _commit_stat_rows(commit_analytics: Dict[str, Any]) -> Optional[Tuple[StatRow, ...]]:
    rows: List[StatRow] = []

    def count(label: str, key: str) -> None:
        n = _int(commit_analytics.get(key))
        if n is not None:
            rows.append(StatRow(label, f"{n:,}"))

    def average(label: str, key: str) -> None:
        n = _number(commit_analytics.get(key))
        if n is not None:
            rows.append(StatRow(label, f"{n:.1f}"))

    def date(label: str, key: str) -> None:
        d = format_date(commit_analytics.get(key))
        if d:
            rows.append(StatRow(label, d))

    count("Total Commits", "totalCommits")
    count("Total Additions", "totalAdditions")
    count("Total Deletions", "totalDeletions")
    average("Average Additions/Commit", "averageAdditionsPerCommit")
    average("Average Files Changed/Commit", "averageFilesChangedPerCommit")
    date("First Commit", "firstCommit")
    date("Last Commit", "lastCommit")
    return tuple(rows) or None


# -----------------------------
# Per-kind normalization
# -----------------------------
def _normalize_account(data: Dict[str, Any], host: str) -> ChartModel:
    repo_stats = _mapping(data.get("repositoryStats"))
    contrib_stats = _mapping(data.get("contributionStats"))
    username = _text(data.get("githubUsername"))

    header = Header(
        avatar_url=_text(data.get("avatarUrl")),
        display_name=_text(data.get("name")) or username or "Unknown user",
        description=_text(data.get("bio")) or "No bio available",
        profile_url=_web_url(host, username),
        created_label=_label("Joined", data.get("createdAt")),
        updated_label=_label("Last active", data.get("updatedAt")),
    )
    metrics = (
        Metric("Public Repositories", _number(data.get("publicRepos"))),
        Metric("Followers", _number(data.get("followers"))),
        Metric("Following", _number(data.get("following"))),
        Metric("Total Stars", _number(repo_stats.get("totalStars"))),
        Metric("Total Forks", _number(repo_stats.get("totalForks"))),
        Metric("Total Commits", _number(contrib_stats.get("totalCommits"))),
    )
    return ChartModel(
        kind=QueryKind.ACCOUNT,
        header=header,
        metrics=metrics,
        language_series=_account_languages(_items(data.get("languageBreakdown"))),
        commit_series=None,
        contributor_series=None,
        project_rows=_project_rows(_items(data.get("topRepositories")), host),
        commit_stat_rows=None,
    )


def _normalize_project(data: Dict[str, Any], host: str) -> ChartModel:
    owner = _mapping(data.get("owner"))
    commits = _mapping(data.get("commitAnalytics"))
    contributors = _mapping(data.get("contributorAnalytics"))
    code = _mapping(data.get("codeAnalytics"))
    size_kb = _number(data.get("sizeKb"))

    full_name = _text(data.get("fullName"))
    if not full_name:
        owner_login = _text(owner.get("githubUsername"))
        repo_name = _text(data.get("repoName"))
        full_name = f"{owner_login}/{repo_name}" if owner_login and repo_name else repo_name

    header = Header(
        avatar_url=_text(owner.get("avatarUrl")),
        display_name=full_name or "Unknown repository",
        description=_text(data.get("description")) or "No description available",
        profile_url=_web_url(host, full_name),
        created_label=_label("Created", data.get("createdAt")),
        updated_label=_label("Updated", data.get("updatedAt")),
    )
    metrics = (
        Metric("Stars", _number(data.get("starsCount"))),
        Metric("Forks", _number(data.get("forksCount"))),
        Metric("Watchers", _number(data.get("watchersCount"))),
        Metric("Total Commits", _number(commits.get("totalCommits"))),
        Metric("Contributors", _number(contributors.get("totalContributors"))),
        Metric("Size (KB)", size_kb),
    )
    return ChartModel(
        kind=QueryKind.PROJECT,
        header=header,
        metrics=metrics,
        language_series=_project_languages(_mapping(code.get("fileTypeDistribution")), size_kb),
        commit_series=_commit_series(_items(commits.get("commitTimeline"))),
        contributor_series=_contributor_series(_items(contributors.get("topContributors"))),
        project_rows=None,
        commit_stat_rows=_commit_stat_rows(commits),
    )


def normalize(payload: Any, kind: Any, *, host: str = "github.com") -> ChartModel:
    """
    Map an account or project payload onto a ChartModel.

    Pure: no I/O, no mutation of the payload. Optional nested sections that
    are missing simply leave the corresponding ChartModel field empty/None.
    """
    if not isinstance(payload, dict):
        raise MalformedData("payload is not an object")
    try:
        query_kind = QueryKind(kind)
    except ValueError:
        raise MalformedData(f"unknown payload kind {kind!r}") from None

    if query_kind is QueryKind.ACCOUNT:
        return _normalize_account(payload, host)
    return _normalize_project(payload, host)
