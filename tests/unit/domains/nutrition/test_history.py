"""Unit tests for the in-process guidance history."""

from __future__ import annotations

import pytest

from smartfuel.domains.nutrition.domain_logic.history import (
    STATUS_ACTIVE,
    STATUS_SUPERSEDED,
    GuidanceHistory,
)
from smartfuel.domains.nutrition.domain_logic.reasoner import default_guidance


@pytest.fixture
def history() -> GuidanceHistory:
    return GuidanceHistory()


def test_current_is_none_for_unknown_user(history):
    assert history.current("nobody") is None
    assert history.history("nobody") == []


def test_record_becomes_current(history):
    record = history.record("u1", default_guidance())
    assert record.status == STATUS_ACTIVE
    assert history.current("u1") == record


def test_new_record_supersedes_previous(history):
    first = history.record("u1", default_guidance())
    second = history.record("u1", default_guidance(goals=["sleep"]))

    assert history.current("u1").id == second.id
    records = history.history("u1")
    assert [r.id for r in records] == [second.id, first.id]
    assert records[1].status == STATUS_SUPERSEDED
    assert records[1].superseded_by == second.id


def test_users_are_isolated(history):
    history.record("u1", default_guidance())
    other = history.record("u2", default_guidance())
    assert history.current("u2") == other
    assert history.current("u1").status == STATUS_ACTIVE


def test_history_limit(history):
    for _ in range(5):
        history.record("u1", default_guidance())
    assert len(history.history("u1", limit=3)) == 3
    assert history.history("u1", limit=0) == []
    assert history.count() == 5


def test_record_to_dict(history):
    data = history.record("u1", default_guidance()).to_dict()
    assert data["userId"] == "u1"
    assert data["status"] == "active"
    assert data["supersededBy"] is None
    assert data["guidance"]["rulesApplied"] == ["default"]


def test_retention_bounds_stored_records():
    history = GuidanceHistory(retention=5)
    last = None
    for _ in range(50):
        last = history.record("u1", default_guidance())

    assert history.count() == 5
    records = history.history("u1", limit=100)
    assert len(records) == 5
    assert records[0].id == last.id
    assert history.current("u1").id == last.id
    assert all(r.status == STATUS_SUPERSEDED for r in records[1:])


def test_retention_is_per_user():
    history = GuidanceHistory(retention=2)
    for _ in range(4):
        history.record("u1", default_guidance())
    history.record("u2", default_guidance())
    assert len(history.history("u1")) == 2
    assert len(history.history("u2")) == 1
    assert history.count() == 3


def test_retention_must_be_positive():
    with pytest.raises(ValueError):
        GuidanceHistory(retention=0)
