"""
HTTP client for the analytics backend.

One request per query, no retries: the caller decides whether to try again.
Transport and HTTP outcomes are mapped onto the error taxonomy so the page
can tell a missing user from a rate limit from a broken server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .errors import (
    InvalidEnvelope,
    NetworkUnavailable,
    NotFound,
    RateLimited,
    ServerError,
    UnexpectedStatus,
)
from .identifiers import AccountRef, QueryKind, QueryRef

logger = logging.getLogger(__name__)

USER_AGENT = "gitlytics-view"


@dataclass(frozen=True)
class FetchResult:
    kind: QueryKind
    payload: Dict[str, Any]


def endpoint_path(ref: QueryRef) -> str:
    quote = requests.utils.quote
    if isinstance(ref, AccountRef):
        return f"/analytics/account/{quote(ref.name, safe='')}"
    return f"/analytics/project/{quote(ref.owner, safe='')}/{quote(ref.name, safe='')}"


class AnalyticsClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: int = 20,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def fetch(self, ref: QueryRef) -> FetchResult:
        url = f"{self.base_url}{endpoint_path(ref)}"
        logger.info("Fetching %s analytics for %s", ref.kind.value, ref.identifier)
        try:
            resp = self.session.get(url, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Backend unreachable at %s: %s", url, e)
            raise NetworkUnavailable(str(e)) from e

        status = resp.status_code
        if status == 404:
            raise NotFound(ref.identifier, kind=ref.kind.value)
        if status == 403:
            raise RateLimited()
        if status >= 500:
            logger.warning("Backend error %s for %s", status, ref.identifier)
            raise ServerError(status)
        if not 200 <= status < 300:
            logger.warning("Unexpected status %s for %s", status, ref.identifier)
            raise UnexpectedStatus(status)

        return FetchResult(kind=ref.kind, payload=unwrap_envelope(resp))


def unwrap_envelope(resp: requests.Response) -> Dict[str, Any]:
    """
    Return the `data` object of a {success, data, message?} envelope.
    """
    try:
        body = resp.json()
    except ValueError as e:
        raise InvalidEnvelope("Response body is not valid JSON") from e

    if not isinstance(body, dict):
        raise InvalidEnvelope()
    message = body.get("message") if isinstance(body.get("message"), str) else None
    if body.get("success") is not True:
        raise InvalidEnvelope(message)
    data = body.get("data")
    if not isinstance(data, dict):
        raise InvalidEnvelope(message)
    return data
