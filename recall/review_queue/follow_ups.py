"""
Follow-ups - Curveball and Spaced Follow-up Queueing

Injects the two non-mistake origins into the review queue from per-concept
coverage records, and applies session outcomes back onto those records.

Lifecycle of a concept once it is fully covered:
1. Spaced follow-up becomes due SPACED_BASE_DELAY_DAYS after it is scheduled
2. Passing it schedules a curveball CURVEBALL_AFTER_PASS_DAYS later
3. A failed curveball is retired and rescheduled CURVEBALL_DELAY_DAYS later
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence, Tuple

from recall.fsrs.memory_state import as_utc, utc_now
from recall.review_queue.constants import (
    BLOOM_CATEGORIES,
    CURVEBALL_AFTER_PASS_DAYS,
    CURVEBALL_DELAY_DAYS,
    CURVEBALL_DIFFICULTY,
    DEFAULT_CURVEBALL_BLOOM,
    MIN_SEED_LENGTH,
    OPEN_ENDED_BLOOMS,
    PLACEHOLDER_PHRASES,
    SPACED_BASE_DELAY_DAYS,
    SPACED_MIN_CATEGORIES,
    SPACED_RETRY_DELAY_DAYS,
)
from recall.review_queue.queue_types import (
    Origin,
    QuestionShape,
    QueueEntry,
    bloom_of,
    make_concept_key,
)
from recall.review_queue.store import QueueStore


@dataclass
class MissedQuestion:
    """A question the learner got wrong while covering a concept."""
    concept_key: str
    question_text: str = ""
    retry_count: int = 0


@dataclass
class CoverageRecord:
    """
    Coverage progress for one concept within a book.

    Owned by the coverage collaborator; updated in place here.
    """
    concept_id: str
    book_id: str
    concept_title: str = ""
    fully_covered: bool = False
    covered_at: Optional[datetime] = None
    categories_covered: set[str] = field(default_factory=set)
    mistakes: list[MissedQuestion] = field(default_factory=list)

    curveball_due_at: Optional[datetime] = None
    curveball_passed: bool = False
    curveball_passed_at: Optional[datetime] = None

    spaced_follow_up_key: Optional[str] = None
    spaced_follow_up_due_at: Optional[datetime] = None
    spaced_follow_up_passed_at: Optional[datetime] = None


@dataclass(frozen=True)
class SessionResult:
    """Outcome of one delivered review item."""
    entry: QueueEntry
    is_correct: bool


def _display_title(coverage: CoverageRecord) -> str:
    return coverage.concept_title or "Idea"


# ---- Curveballs ----

def curveball_spec(coverage: CoverageRecord) -> Tuple[str, QuestionShape]:
    """
    Decide the bloom category and shape of a concept's curveball.

    - Never missed anything: highest-order check, open-ended
    - Otherwise: the category retried most, open-ended only for HowWield/Reframe
    """
    fallback = (DEFAULT_CURVEBALL_BLOOM, QuestionShape.OPEN_ENDED)
    if not coverage.mistakes:
        return fallback

    most_retried = max(coverage.mistakes, key=lambda m: m.retry_count)
    bloom = bloom_of(most_retried.concept_key)
    if bloom not in BLOOM_CATEGORIES:
        return fallback

    if bloom in OPEN_ENDED_BLOOMS:
        return bloom, QuestionShape.OPEN_ENDED
    return bloom, QuestionShape.SINGLE_SELECT


def is_poor_seed(text: str) -> bool:
    """Too short, or a leftover option label rather than a real question."""
    trimmed = text.strip()
    if len(trimmed) < MIN_SEED_LENGTH:
        return True
    lower = trimmed.lower()
    return any(phrase in lower for phrase in PLACEHOLDER_PHRASES)


def curveball_seed(coverage: CoverageRecord, bloom: str) -> str:
    """
    Most recent missed question in that bloom category, or a generic prompt.
    """
    generic = f"Curveball validation for {_display_title(coverage)}"
    for missed in reversed(coverage.mistakes):
        if missed.concept_key.startswith(bloom):
            return generic if is_poor_seed(missed.question_text) else missed.question_text
    return generic


def ensure_curveballs_queued(
    coverages: Iterable[CoverageRecord],
    store: QueueStore,
    book_id: str,
    book_title: Optional[str] = None,
    now: Optional[datetime] = None
) -> list[QueueEntry]:
    """
    Queue one curveball per fully covered concept that is due.

    Concepts without a due date are scheduled CURVEBALL_DELAY_DAYS after
    coverage. Concepts with a pending curveball are skipped.

    Returns:
        Curveball entries actually inserted
    """
    if now is None:
        now = utc_now()

    queued: list[QueueEntry] = []
    for coverage in coverages:
        if coverage.book_id != book_id or not coverage.fully_covered or coverage.curveball_passed:
            continue

        if coverage.curveball_due_at is None:
            base = coverage.covered_at or now
            coverage.curveball_due_at = base + timedelta(days=CURVEBALL_DELAY_DAYS)
        if as_utc(coverage.curveball_due_at) > as_utc(now):
            continue

        if store.has_pending_origin(coverage.concept_id, Origin.CURVEBALL, book_id):
            continue

        bloom, shape = curveball_spec(coverage)
        entry = QueueEntry(
            concept_id=coverage.concept_id,
            book_id=book_id,
            book_title=book_title,
            concept_title=coverage.concept_title or None,
            question_shape=shape,
            concept_key=make_concept_key(bloom, CURVEBALL_DIFFICULTY),
            origin=Origin.CURVEBALL,
            added_at=now,
            source_text=curveball_seed(coverage, bloom),
        )
        if store.add_unique(entry):
            queued.append(entry)

    if queued:
        print(f"[REVIEW QUEUE] Queued {len(queued)} curveballs for book {book_id}")
    return queued


# ---- Spaced Follow-ups ----

def schedule_spaced_follow_up(
    coverage: CoverageRecord,
    now: Optional[datetime] = None
) -> bool:
    """
    Set the first spaced follow-up due date once a concept is ready for it.

    Returns:
        True if a due date was set
    """
    if now is None:
        now = utc_now()

    ready = (
        len(coverage.categories_covered) >= SPACED_MIN_CATEGORIES
        and coverage.spaced_follow_up_passed_at is None
        and coverage.spaced_follow_up_due_at is None
        and bool(coverage.spaced_follow_up_key)
    )
    if ready:
        coverage.spaced_follow_up_due_at = now + timedelta(days=SPACED_BASE_DELAY_DAYS)
    return ready


def ensure_spaced_follow_ups_queued(
    coverages: Iterable[CoverageRecord],
    store: QueueStore,
    book_id: str,
    book_title: Optional[str] = None,
    now: Optional[datetime] = None
) -> list[QueueEntry]:
    """
    Queue one open-ended spaced follow-up per due concept.

    Requires a due date in the past, SPACED_MIN_CATEGORIES covered categories
    and a chosen concept key; concepts with a pending follow-up are skipped.

    Returns:
        Follow-up entries actually inserted
    """
    if now is None:
        now = utc_now()

    queued: list[QueueEntry] = []
    for coverage in coverages:
        if coverage.book_id != book_id or coverage.spaced_follow_up_passed_at is not None:
            continue
        due = coverage.spaced_follow_up_due_at
        if due is None or as_utc(due) > as_utc(now):
            continue
        if len(coverage.categories_covered) < SPACED_MIN_CATEGORIES:
            continue
        if not coverage.spaced_follow_up_key:
            continue
        if store.has_pending_origin(coverage.concept_id, Origin.SPACED_FOLLOW_UP, book_id):
            continue

        entry = QueueEntry(
            concept_id=coverage.concept_id,
            book_id=book_id,
            book_title=book_title,
            concept_title=coverage.concept_title or None,
            question_shape=QuestionShape.OPEN_ENDED,
            concept_key=coverage.spaced_follow_up_key,
            origin=Origin.SPACED_FOLLOW_UP,
            added_at=now,
            source_text=f"Spaced follow-up for {_display_title(coverage)}",
        )
        if store.add_unique(entry):
            queued.append(entry)

    if queued:
        print(f"[REVIEW QUEUE] Queued {len(queued)} spaced follow-ups for book {book_id}")
    return queued


# ---- Session Outcomes ----

def apply_session_results(
    results: Sequence[SessionResult],
    coverages: Iterable[CoverageRecord],
    store: QueueStore,
    now: Optional[datetime] = None
) -> list[QueueEntry]:
    """
    Retire answered review items and update coverage for follow-up origins.

    Correct answers and failed curveballs are marked completed in a single
    all-or-nothing batch before any coverage record changes. A failed
    spaced follow-up stays pending and becomes due again later.

    Returns:
        Entries marked completed
    """
    if now is None:
        now = utc_now()

    to_complete = [
        r.entry for r in results
        if r.is_correct or r.entry.origin == Origin.CURVEBALL
    ]
    completed = store.mark_completed(to_complete)

    by_key = {(c.concept_id, c.book_id): c for c in coverages}
    for result in results:
        entry = result.entry
        coverage = by_key.get((entry.concept_id, entry.book_id))
        if coverage is None:
            continue

        if entry.origin == Origin.CURVEBALL:
            if result.is_correct:
                coverage.curveball_passed = True
                coverage.curveball_passed_at = now
            else:
                coverage.curveball_due_at = now + timedelta(days=CURVEBALL_DELAY_DAYS)

        elif entry.origin == Origin.SPACED_FOLLOW_UP:
            if result.is_correct:
                coverage.spaced_follow_up_passed_at = now
                coverage.curveball_due_at = now + timedelta(days=CURVEBALL_AFTER_PASS_DAYS)
            else:
                coverage.spaced_follow_up_due_at = now + timedelta(days=SPACED_RETRY_DELAY_DAYS)

    return completed
