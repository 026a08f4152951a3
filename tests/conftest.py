"""Shared fixtures: backend payloads and a stub HTTP session."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import pytest
import requests

ACCOUNT_PAYLOAD: Dict[str, Any] = {
    "githubUsername": "acme",
    "name": "Acme Corp",
    "avatarUrl": "https://avatars.example.com/acme.png",
    "bio": "We build widgets.",
    "publicRepos": 42,
    "followers": 1500,
    "following": 3,
    "createdAt": "2015-03-04 10:00:00",
    "updatedAt": "2024-01-02 08:30:00",
    "repositoryStats": {"totalStars": 2500000, "totalForks": 830},
    "contributionStats": {"totalCommits": 12345},
    "topRepositories": [
        {
            "repoName": "widget",
            "fullName": "acme/widget",
            "language": "Go",
            "starsCount": 1200,
            "forksCount": 80,
            "commitsCount": 640,
            "lastPushAt": "2024-01-01 12:00:00",
        },
        {"repoName": "docs", "fullName": "acme/docs", "language": None, "starsCount": 3},
    ],
    "languageBreakdown": [
        {"language": "Go", "percentage": 60, "repositoryCount": 3, "totalStars": 1200},
        {"language": "Python", "percentage": 30, "repositoryCount": 2, "totalStars": 10},
        {"language": "Shell", "percentage": 4, "repositoryCount": 1, "totalStars": 0},
    ],
}

PROJECT_PAYLOAD: Dict[str, Any] = {
    "repoName": "widget",
    "fullName": "acme/widget",
    "description": "A widget.",
    "starsCount": 1200,
    "forksCount": 80,
    "watchersCount": 40,
    "sizeKb": 100,
    "createdAt": "2016-05-01 00:00:00",
    "updatedAt": "2024-02-10 00:00:00",
    "owner": {"githubUsername": "acme", "name": "Acme Corp", "avatarUrl": "https://avatars.example.com/acme.png"},
    "commitAnalytics": {
        "totalCommits": 640,
        "totalAdditions": 52000,
        "totalDeletions": 21000,
        "averageAdditionsPerCommit": 81.25,
        "averageFilesChangedPerCommit": 3.4,
        "firstCommit": "2016-05-01 09:00:00",
        "lastCommit": "2024-02-09 18:00:00",
        "commitTimeline": [
            {"date": "2024-01-03", "commits": 7, "additions": 300, "deletions": 20},
            {"date": "2024-01-01", "commits": 2, "additions": 40, "deletions": 5},
            {"date": "2024-01-02", "commits": 5, "additions": 120, "deletions": 60},
        ],
    },
    "contributorAnalytics": {
        "totalContributors": 12,
        "topContributors": [
            {"contributorName": "alice", "contributionCount": 300},
            {"contributorName": "bob", "contributionCount": 120},
        ],
    },
    "codeAnalytics": {"fileTypeDistribution": {"Go": 50.0, "Markdown": 30.0, "YAML": 20.0}},
}


@pytest.fixture
def account_payload() -> Dict[str, Any]:
    return copy.deepcopy(ACCOUNT_PAYLOAD)


@pytest.fixture
def project_payload() -> Dict[str, Any]:
    return copy.deepcopy(PROJECT_PAYLOAD)


class StubResponse:
    """Just enough of requests.Response for the client."""

    def __init__(self, status_code: int, body: Any = None, *, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._body = body
        self._text = text

    def json(self) -> Any:
        if self._text is not None:
            raise ValueError("not json")
        return self._body


class StubSession:
    """Records GET calls and replays queued responses or exceptions."""

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> StubResponse:
        self.calls.append({"url": url, **kwargs})
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def ok(data: Any) -> StubResponse:
    return StubResponse(200, {"success": True, "data": data, "message": "Success"})


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
