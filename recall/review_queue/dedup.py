"""
Dedup predicates over queue snapshots.

These are pure functions so the insertion-time check and the selection-time
check can be exercised without a database.
"""

from __future__ import annotations
from typing import Iterable, Optional

from recall.review_queue.queue_types import (
    ActiveKey,
    Origin,
    QuestionShape,
    QueueEntry,
    SelectionKey,
)


def active_key(entry: QueueEntry) -> ActiveKey:
    """Key under which at most one non-completed entry may exist."""
    return (entry.concept_id, entry.concept_key, entry.question_shape)


def selection_key(entry: QueueEntry) -> SelectionKey:
    """Key under which at most one entry is selected per session."""
    return (entry.concept_id, entry.concept_key)


def has_active_duplicate(
    entries: Iterable[QueueEntry],
    concept_id: str,
    concept_key: str,
    question_shape: QuestionShape
) -> bool:
    """
    True if a non-completed entry already covers this concept/key/shape.
    """
    target = (concept_id, concept_key, question_shape)
    return any(not e.completed and active_key(e) == target for e in entries)


def has_pending_origin(
    entries: Iterable[QueueEntry],
    concept_id: str,
    origin: Origin,
    book_id: Optional[str] = None
) -> bool:
    """
    True if a non-completed entry of this origin exists for the concept.
    """
    return any(
        not e.completed
        and e.concept_id == concept_id
        and e.origin == origin
        and (book_id is None or e.book_id == book_id)
        for e in entries
    )


def first_per_key(entries: Iterable[QueueEntry]) -> list[QueueEntry]:
    """
    Keep the first entry seen per (concept_id, concept_key), preserving order.
    """
    seen: set[SelectionKey] = set()
    kept: list[QueueEntry] = []
    for entry in entries:
        key = selection_key(entry)
        if key in seen:
            continue
        seen.add(key)
        kept.append(entry)
    return kept
