"""Unit tests for the cross-view results record."""

from __future__ import annotations

import json

import pytest

from gitlytics_view.errors import ExpiredData, MalformedData
from gitlytics_view.identifiers import QueryKind
from gitlytics_view.storage import RESULTS_TTL_MS, ResultStore, is_expired, parse_record

pytestmark = pytest.mark.unit


class Clock:
    def __init__(self, now: int) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def test_staleness_window_boundaries() -> None:
    now = 10_000_000
    assert is_expired(now - 301_000, now)
    assert not is_expired(now - 299_000, now)
    assert not is_expired(now - RESULTS_TTL_MS, now)


def test_store_round_trip_within_window(account_payload) -> None:
    clock = Clock(1_000_000)
    store = ResultStore(clock=clock)
    store.put("view-1", QueryKind.ACCOUNT, account_payload)

    clock.now += 299_000
    record = store.load("view-1")
    assert record.kind is QueryKind.ACCOUNT
    assert record.data == account_payload
    assert record.timestamp == 1_000_000


def test_store_expires_old_records(account_payload) -> None:
    clock = Clock(1_000_000)
    store = ResultStore(clock=clock)
    store.put("view-1", QueryKind.ACCOUNT, account_payload)

    clock.now += 301_000
    with pytest.raises(ExpiredData):
        store.load("view-1")
    # expired records are dropped
    assert store.load("view-1") is None


def test_store_missing_record_is_none() -> None:
    assert ResultStore().load("nobody") is None


def test_store_keeps_views_apart(account_payload, project_payload) -> None:
    store = ResultStore(clock=Clock(5))
    store.put("a", QueryKind.ACCOUNT, account_payload)
    store.put("b", QueryKind.PROJECT, project_payload)
    assert store.load("a").kind is QueryKind.ACCOUNT
    assert store.load("b").kind is QueryKind.PROJECT


def test_store_payload_is_a_copy(account_payload) -> None:
    store = ResultStore(clock=Clock(5))
    store.put("a", QueryKind.ACCOUNT, account_payload)
    account_payload["followers"] = -1
    assert store.load("a").data["followers"] == 1500


def test_discard() -> None:
    store = ResultStore(clock=Clock(5))
    store.put("a", QueryKind.ACCOUNT, {"x": 1})
    store.discard("a")
    store.discard("a")
    assert store.load("a") is None


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps([1, 2]),
        json.dumps({"kind": "account", "data": {}}),
        json.dumps({"kind": "galaxy", "data": {}, "timestamp": 1}),
        json.dumps({"kind": ["account"], "data": {}, "timestamp": 1}),
        json.dumps({"kind": "account", "data": "oops", "timestamp": 1}),
        json.dumps({"kind": "account", "data": {}, "timestamp": True}),
    ],
)
def test_malformed_records(raw: str) -> None:
    store = ResultStore(clock=Clock(5))
    store.put_raw("a", raw)
    with pytest.raises(MalformedData):
        store.load("a")
    assert store.load("a") is None


def test_legacy_kind_names_parse() -> None:
    record = parse_record(json.dumps({"kind": "repository", "data": {}, "timestamp": 1}))
    assert record.kind is QueryKind.PROJECT
