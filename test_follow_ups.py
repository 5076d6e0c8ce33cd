"""
Tests for curveball and spaced follow-up queueing.
"""

from datetime import timedelta

import pytest

from recall.review_queue import InMemoryQueueStore, Origin, QuestionShape
from recall.review_queue.constants import BLOOM_CATEGORIES
from recall.review_queue.follow_ups import (
    CoverageRecord,
    MissedQuestion,
    SessionResult,
    apply_session_results,
    curveball_seed,
    curveball_spec,
    ensure_curveballs_queued,
    ensure_spaced_follow_ups_queued,
    is_poor_seed,
    schedule_spaced_follow_up,
)
from recall.review_queue.selector import select_daily


def _covered(now, concept_id="b1i1", **kwargs):
    kwargs.setdefault("covered_at", now - timedelta(days=4))
    return CoverageRecord(
        concept_id=concept_id,
        book_id="book-1",
        concept_title="Attention residue",
        fully_covered=True,
        **kwargs
    )


# ---- Curveball shape and seed ----

def test_curveball_spec_without_mistakes(now):
    assert curveball_spec(_covered(now)) == ("HowWield", QuestionShape.OPEN_ENDED)


def test_curveball_spec_uses_most_retried_category(now):
    coverage = _covered(now, mistakes=[
        MissedQuestion("Recall-Easy", retry_count=1),
        MissedQuestion("Contrast-Medium", retry_count=3),
        MissedQuestion("Apply-Medium", retry_count=2),
    ])
    assert curveball_spec(coverage) == ("Contrast", QuestionShape.SINGLE_SELECT)

    coverage.mistakes.append(MissedQuestion("Reframe-Hard", retry_count=5))
    assert curveball_spec(coverage) == ("Reframe", QuestionShape.OPEN_ENDED)


def test_curveball_spec_unknown_category_falls_back(now):
    coverage = _covered(now, mistakes=[MissedQuestion("Mystery-Hard", retry_count=1)])
    assert curveball_spec(coverage) == ("HowWield", QuestionShape.OPEN_ENDED)
    assert "Mystery" not in BLOOM_CATEGORIES


@pytest.mark.parametrize("text, poor", [
    ("too short", True),
    ("Which of the following best describes attention residue?", False),
    ("None of the above applies to this idea", True),
    ("   ", True),
])
def test_is_poor_seed(text, poor):
    assert is_poor_seed(text) == poor


def test_curveball_seed_prefers_latest_matching_question(now):
    coverage = _covered(now, mistakes=[
        MissedQuestion("Contrast-Medium", "Why does switching tasks leave residue behind?"),
        MissedQuestion("Contrast-Hard", "How would residue change a deep work block?"),
        MissedQuestion("Recall-Easy", "What is attention residue in your own words?"),
    ])

    assert curveball_seed(coverage, "Contrast") == "How would residue change a deep work block?"
    assert curveball_seed(coverage, "Reframe") == "Curveball validation for Attention residue"


def test_curveball_seed_rejects_poor_text(now):
    coverage = _covered(now, mistakes=[MissedQuestion("Contrast-Medium", "Option A")])
    assert curveball_seed(coverage, "Contrast") == "Curveball validation for Attention residue"


# ---- Curveball queueing ----

def test_curveball_queued_once_due(now):
    store = InMemoryQueueStore()
    coverage = _covered(now)

    queued = ensure_curveballs_queued([coverage], store, "book-1", "Deep Work", now)

    assert len(queued) == 1
    entry = queued[0]
    assert entry.origin == Origin.CURVEBALL
    assert entry.concept_key == "HowWield-Hard"
    assert entry.question_shape == QuestionShape.OPEN_ENDED
    assert entry.book_title == "Deep Work"
    assert coverage.curveball_due_at == now - timedelta(days=1)

    # Still pending: nothing new
    assert ensure_curveballs_queued([coverage], store, "book-1", now=now) == []


def test_curveball_not_due_yet(now):
    store = InMemoryQueueStore()
    coverage = _covered(now, covered_at=now - timedelta(days=1))

    assert ensure_curveballs_queued([coverage], store, "book-1", now=now) == []
    assert coverage.curveball_due_at == now + timedelta(days=2)


def test_curveball_skips_uncovered_and_passed(now):
    store = InMemoryQueueStore()
    uncovered = CoverageRecord(concept_id="b1i1", book_id="book-1")
    passed = _covered(now, concept_id="b1i2", curveball_passed=True)
    other_book = _covered(now, concept_id="b2i1")
    other_book.book_id = "book-2"

    assert ensure_curveballs_queued([uncovered, passed, other_book], store, "book-1", now=now) == []


def test_curveball_outranks_mistakes_in_selection(now, make_entry):
    store = InMemoryQueueStore([
        make_entry("b1i5", "Reframe-Hard", QuestionShape.OPEN_ENDED, minutes=-600),
    ])
    ensure_curveballs_queued([_covered(now)], store, "book-1", now=now)

    _, open_ended = select_daily(store.fetch_active("book-1"))

    assert [e.origin for e in open_ended] == [Origin.CURVEBALL]


# ---- Spaced follow-ups ----

def _ready_for_spaced(now, **kwargs):
    return _covered(
        now,
        categories_covered=set(BLOOM_CATEGORIES),
        spaced_follow_up_key="Apply-Medium",
        **kwargs
    )


def test_schedule_spaced_follow_up(now):
    coverage = _ready_for_spaced(now)

    assert schedule_spaced_follow_up(coverage, now)
    assert coverage.spaced_follow_up_due_at == now + timedelta(days=3)
    assert not schedule_spaced_follow_up(coverage, now + timedelta(days=1))


def test_schedule_requires_all_categories(now):
    coverage = _ready_for_spaced(now)
    coverage.categories_covered = set(BLOOM_CATEGORIES[:7])

    assert not schedule_spaced_follow_up(coverage, now)
    assert coverage.spaced_follow_up_due_at is None


def test_spaced_follow_up_queued_when_due(now):
    store = InMemoryQueueStore()
    coverage = _ready_for_spaced(now, spaced_follow_up_due_at=now - timedelta(hours=1))
    not_due = _ready_for_spaced(now, concept_id="b1i2", spaced_follow_up_due_at=now + timedelta(days=1))

    queued = ensure_spaced_follow_ups_queued([coverage, not_due], store, "book-1", now=now)

    assert [(e.concept_id, e.origin, e.question_shape, e.concept_key) for e in queued] == [
        ("b1i1", Origin.SPACED_FOLLOW_UP, QuestionShape.OPEN_ENDED, "Apply-Medium")
    ]
    assert ensure_spaced_follow_ups_queued([coverage], store, "book-1", now=now) == []


def test_spaced_follow_up_needs_key(now):
    store = InMemoryQueueStore()
    coverage = _ready_for_spaced(now, spaced_follow_up_due_at=now)
    coverage.spaced_follow_up_key = None

    assert ensure_spaced_follow_ups_queued([coverage], store, "book-1", now=now) == []


# ---- Session outcomes ----

def test_passed_spaced_follow_up_schedules_curveball(now):
    store = InMemoryQueueStore()
    coverage = _ready_for_spaced(now, spaced_follow_up_due_at=now)
    [entry] = ensure_spaced_follow_ups_queued([coverage], store, "book-1", now=now)

    completed = apply_session_results([SessionResult(entry, True)], [coverage], store, now)

    assert [e.id for e in completed] == [entry.id]
    assert coverage.spaced_follow_up_passed_at == now
    assert coverage.curveball_due_at == now + timedelta(days=5)
    assert store.fetch_active("book-1") == []


def test_failed_spaced_follow_up_stays_pending(now):
    store = InMemoryQueueStore()
    coverage = _ready_for_spaced(now, spaced_follow_up_due_at=now)
    [entry] = ensure_spaced_follow_ups_queued([coverage], store, "book-1", now=now)

    completed = apply_session_results([SessionResult(entry, False)], [coverage], store, now)

    assert completed == []
    assert coverage.spaced_follow_up_due_at == now + timedelta(days=2)
    assert [e.id for e in store.fetch_active("book-1")] == [entry.id]


def test_curveball_outcomes(now):
    store = InMemoryQueueStore()
    passed = _covered(now)
    failed = _covered(now, concept_id="b1i2")
    queued = ensure_curveballs_queued([passed, failed], store, "book-1", now=now)
    results = [SessionResult(queued[0], True), SessionResult(queued[1], False)]

    completed = apply_session_results(results, [passed, failed], store, now)

    assert len(completed) == 2
    assert passed.curveball_passed
    assert passed.curveball_passed_at == now
    assert not failed.curveball_passed
    assert failed.curveball_due_at == now + timedelta(days=3)


def test_wrong_mistake_stays_pending(now, make_entry):
    mistake = make_entry("b1i1")
    store = InMemoryQueueStore([mistake])

    assert apply_session_results([SessionResult(mistake, False)], [], store, now) == []
    assert [e.id for e in store.fetch_active("book-1")] == [mistake.id]


def test_unknown_entry_leaves_coverage_untouched(now, make_entry):
    store = InMemoryQueueStore()
    coverage = _covered(now)
    [entry] = ensure_curveballs_queued([coverage], store, "book-1", now=now)
    stray = make_entry("b1i9")

    with pytest.raises(ValueError):
        apply_session_results(
            [SessionResult(entry, True), SessionResult(stray, True)], [coverage], store, now
        )

    assert not coverage.curveball_passed
    assert [e.id for e in store.fetch_active("book-1")] == [entry.id]
