"""
Scheduling - Main API for Concept Reviews

Ties the scheduler to the database: load (or lazily create) the concept's
memory state, grade the attempt, persist the new state and log the event.
"""

from __future__ import annotations
from datetime import datetime
from typing import Callable, Optional

from recall.fsrs import database, scheduler
from recall.fsrs.constants import ImportanceTier
from recall.fsrs.memory_state import MemoryState, utc_now


def _unset_tier(concept_id: str) -> ImportanceTier:
    return ImportanceTier.UNSET


def review_concept(
    concept_id: str,
    correct: int,
    total: int,
    tier_lookup: Optional[Callable[[str], ImportanceTier]] = None,
    now: Optional[datetime] = None
) -> MemoryState:
    """
    Record a graded attempt on one concept and reschedule it.

    Workflow:
    1. Load memory state (or initialize from the concept's importance tier)
    2. Classify the score into a Performance grade
    3. Advance the state
    4. Save state and log event

    Args:
        concept_id: Concept that was tested
        correct: Number of correct answers for this concept
        total: Number of questions asked for this concept
        tier_lookup: Callable(concept_id) -> ImportanceTier for new states
        now: Review timestamp (defaults to now)

    Returns:
        The updated MemoryState
    """
    if now is None:
        now = utc_now()
    if tier_lookup is None:
        tier_lookup = _unset_tier

    state = database.get_or_create_memory_state(concept_id, tier_lookup, now)
    performance = scheduler.classify(correct, total)
    updated, event = scheduler.process_review(state, performance, now)
    event['correct'] = correct
    event['total'] = total

    database.save_memory_state(concept_id, updated)
    database.log_review_event(concept_id, event)

    print(
        f"[FSRS] {concept_id}: {correct}/{total} -> {performance.name}, "
        f"next review in {updated.interval:.1f} days"
    )
    return updated


def get_due_concepts(now: Optional[datetime] = None) -> list[str]:
    """Concept ids due for review at `now`, most overdue first."""
    return database.get_due_concept_ids(now)
