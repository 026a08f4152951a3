"""
Short-lived storage handing a fetched payload from the search page to the
results page.

Records are kept serialized, keyed by view id, and stop being renderable once
they are older than the staleness window (5 minutes by default).
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .errors import ExpiredData, MalformedData
from .identifiers import QueryKind

logger = logging.getLogger(__name__)

RESULTS_TTL_MS = 5 * 60 * 1000

_KIND_ALIASES = {"user": QueryKind.ACCOUNT, "repository": QueryKind.PROJECT}


def now_ms() -> int:
    return int(time.time() * 1000)


def is_expired(timestamp: int, now: int, ttl_ms: int = RESULTS_TTL_MS) -> bool:
    return now - timestamp > ttl_ms


@dataclass(frozen=True)
class ResultRecord:
    kind: QueryKind
    data: Dict[str, Any]
    timestamp: int

    def dumps(self) -> str:
        return json.dumps({"kind": self.kind.value, "data": self.data, "timestamp": self.timestamp})


def parse_record(raw: str) -> ResultRecord:
    try:
        obj = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedData(f"record is not JSON: {e}") from e
    if not isinstance(obj, dict):
        raise MalformedData("record is not an object")

    kind_raw = obj.get("kind")
    if not isinstance(kind_raw, str):
        raise MalformedData("record kind is missing")
    try:
        kind = _KIND_ALIASES.get(kind_raw) or QueryKind(kind_raw)
    except ValueError:
        raise MalformedData(f"unknown record kind {kind_raw!r}") from None

    data = obj.get("data")
    timestamp = obj.get("timestamp")
    if not isinstance(data, dict):
        raise MalformedData("record data is not an object")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise MalformedData("record timestamp is missing")
    return ResultRecord(kind=kind, data=data, timestamp=int(timestamp))


class ResultStore:
    def __init__(self, ttl_ms: int = RESULTS_TTL_MS, clock: Callable[[], int] = now_ms) -> None:
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._records: Dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, key: str, kind: QueryKind, data: Dict[str, Any]) -> ResultRecord:
        record = ResultRecord(kind=QueryKind(kind), data=data, timestamp=self._clock())
        self.put_raw(key, record.dumps())
        return record

    def put_raw(self, key: str, raw: str) -> None:
        with self._lock:
            self._records[key] = raw

    def discard(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def load(self, key: str) -> Optional[ResultRecord]:
        """
        Return the record for `key`, or None when nothing was stored.

        Raises MalformedData for an unreadable record and ExpiredData for one
        older than the staleness window; both are dropped from the store.
        """
        with self._lock:
            raw = self._records.get(key)
        if raw is None:
            return None

        try:
            record = parse_record(raw)
        except MalformedData as e:
            logger.warning("Dropping malformed results record for view %s: %s", key, e.detail)
            self.discard(key)
            raise

        if is_expired(record.timestamp, self._clock(), self.ttl_ms):
            logger.warning("Results record for view %s expired", key)
            self.discard(key)
            raise ExpiredData()
        return record
