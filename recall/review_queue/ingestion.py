"""
Ingestion - Mistake Capture

Turns the wrong answers of a graded attempt into Mistake queue entries.

Rules:
- One entry per incorrect response whose concept and question resolve
- Skip when an active entry already exists for (concept_id, concept_key, shape)
- Re-ingesting the same attempt adds nothing
"""

from __future__ import annotations
from datetime import datetime
from typing import Callable, Iterable, Optional

from recall.fsrs.memory_state import utc_now
from recall.review_queue import dedup
from recall.review_queue.queue_types import Origin, QueueEntry
from recall.review_queue.store import QueueStore
from recall.schemas import ConceptRecord, GradedAttempt, GradedResponse


ConceptLookup = Callable[[str], Optional[ConceptRecord]]


def _mistake_entry(
    attempt: GradedAttempt,
    response: GradedResponse,
    concept: Optional[ConceptRecord],
    now: datetime
) -> Optional[QueueEntry]:
    concept_key = response.resolve_concept_key()
    if concept_key is None or response.question_shape is None:
        return None

    return QueueEntry(
        concept_id=response.concept_id,
        book_id=attempt.book_id,
        book_title=attempt.book_title,
        concept_title=concept.title if concept else None,
        question_shape=response.question_shape,
        concept_key=concept_key,
        origin=Origin.MISTAKE,
        added_at=now,
        source_text=response.question_text,
    )


def plan_mistake_entries(
    attempt: GradedAttempt,
    snapshot: Iterable[QueueEntry] = (),
    concept_lookup: Optional[ConceptLookup] = None,
    now: Optional[datetime] = None
) -> list[QueueEntry]:
    """
    Compute the entries an attempt would add, against a snapshot (no store).

    Args:
        attempt: Graded attempt from the grading collaborator
        snapshot: Existing queue entries to dedup against
        concept_lookup: Callable(concept_id) -> ConceptRecord or None;
            concepts that no longer resolve are skipped
        now: Timestamp for new entries (defaults to now)

    Returns:
        New entries in response order
    """
    if now is None:
        now = attempt.attempted_at or utc_now()

    known = list(snapshot)
    planned: list[QueueEntry] = []

    for response in attempt.incorrect_responses:
        concept = None
        if concept_lookup is not None:
            concept = concept_lookup(response.concept_id)
            if concept is None:
                continue

        entry = _mistake_entry(attempt, response, concept, now)
        if entry is None:
            continue
        if dedup.has_active_duplicate(
            known, entry.concept_id, entry.concept_key, entry.question_shape
        ):
            continue

        known.append(entry)
        planned.append(entry)

    return planned


def ingest(
    attempt: GradedAttempt,
    concept_lookup: Optional[ConceptLookup],
    store: QueueStore,
    now: Optional[datetime] = None
) -> list[QueueEntry]:
    """
    Queue the mistakes of a graded attempt.

    The duplicate check runs inside the store's insert, so concurrent
    ingestion of the same mistake still yields one active entry.

    Returns:
        Entries actually inserted
    """
    planned = plan_mistake_entries(attempt, (), concept_lookup, now)
    added = [entry for entry in planned if store.add_unique(entry)]

    if attempt.incorrect_responses:
        print(
            f"[REVIEW QUEUE] Added {len(added)} of {len(attempt.incorrect_responses)} "
            f"mistakes to review queue for book {attempt.book_id}"
        )
    return added
