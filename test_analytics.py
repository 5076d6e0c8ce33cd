"""
Tests for the per-book review dashboard.
"""

from datetime import timedelta

import pytest

from recall.analytics import build_book_dashboard
from recall.analytics.constants import ORIGIN_LABELS
from recall.fsrs.constants import ImportanceTier, Performance
from recall.fsrs.memory_state import initialize
from recall.fsrs.scheduler import advance
from recall.review_queue import InMemoryQueueStore, Origin, QuestionShape


def test_empty_dashboard(now):
    data = build_book_dashboard(InMemoryQueueStore(), "book-1", {}, now)

    assert data.pending_mcq == 0
    assert data.pending_open_ended == 0
    assert data.pending_by_origin.sum() == 0
    assert data.added_daily.empty
    assert data.concepts_tracked == 0
    assert data.mean_retention == 0.0


def test_dashboard_counts(now, make_entry):
    day = 24 * 60
    entries = [
        make_entry("b1i1", shape=QuestionShape.SINGLE_SELECT, minutes=0),
        make_entry("b1i2", shape=QuestionShape.MULTI_SELECT, minutes=10),
        make_entry("b1i3", "HowWield-Hard", QuestionShape.OPEN_ENDED, Origin.CURVEBALL, minutes=2 * day),
        make_entry("b1i4", shape=QuestionShape.SINGLE_SELECT, minutes=2 * day + 5, completed=True),
        make_entry("b2i1", book_id="book-2"),
    ]
    store = InMemoryQueueStore(entries)

    fresh = initialize(ImportanceTier.FOUNDATION, now)
    reviewed = advance(initialize(ImportanceTier.UNSET, now - timedelta(days=10)),
                       Performance.AGAIN, now - timedelta(days=5))
    states = {"b1i1": fresh, "b1i2": reviewed}

    data = build_book_dashboard(store, "book-1", states, now)

    assert (data.pending_mcq, data.pending_open_ended) == (2, 1)
    assert data.pending_by_origin[Origin.MISTAKE.value] == 2
    assert data.pending_by_origin[Origin.CURVEBALL.value] == 1
    assert data.pending_by_origin[Origin.SPACED_FOLLOW_UP.value] == 0

    # Three calendar days, middle one empty
    assert data.added_daily.tolist() == [2, 0, 2]

    assert data.concepts_tracked == 2
    assert data.concepts_due == 1
    assert data.concepts_retained == 1
    assert data.mean_retention == pytest.approx((1.0 + 0.006737947) / 2, abs=1e-6)


def test_every_origin_has_a_label():
    assert set(ORIGIN_LABELS) == {origin.value for origin in Origin}
    assert all(ORIGIN_LABELS.values())
