"""
Selector - Daily Review Queue Assembly

Picks the day's review items for one book from its pending entries:
1. Priority pick: at most one Curveball (else one SpacedFollowUp)
2. Choice pool: MCQ/MSQ entries, first per (concept_id, concept_key)
3. Open pool: open-ended entries, first per key, SpacedFollowUp before Mistake

Session Logic:
- The priority pick claims one slot in the bucket of its own shape
- Remaining slots are filled in added_at order up to the daily caps
- A (concept_id, concept_key) is never selected twice in one session

No entry is mutated; completion is a separate store operation.
"""

from __future__ import annotations
from typing import Iterable, Optional, Sequence, Tuple

from recall.fsrs.memory_state import as_utc
from recall.review_queue.constants import DAILY_MCQ_CAP, DAILY_OPEN_CAP
from recall.review_queue.dedup import first_per_key, selection_key
from recall.review_queue.queue_types import ORIGIN_RANK, Origin, QueueEntry


DailySelection = Tuple[list[QueueEntry], list[QueueEntry]]


def entries_for_book(
    entries: Iterable[QueueEntry],
    book_id: str,
    book_title: Optional[str] = None
) -> list[QueueEntry]:
    """
    Filter to non-completed entries for one book.

    Legacy entries without a book_id are matched by title when one is given.
    """
    return [
        e for e in entries
        if not e.completed and (
            e.book_id == book_id
            or (book_title is not None and e.book_id is None and e.book_title == book_title)
        )
    ]


def chronological(entries: Iterable[QueueEntry]) -> list[QueueEntry]:
    """Sort by added_at; ties keep their input order."""
    return sorted(entries, key=lambda e: as_utc(e.added_at))


def priority_pick(ordered: Sequence[QueueEntry]) -> Optional[QueueEntry]:
    """
    First Curveball, else first SpacedFollowUp, else None.
    """
    candidates = [e for e in ordered if e.origin.rank < ORIGIN_RANK[Origin.MISTAKE]]
    if not candidates:
        return None
    return min(candidates, key=lambda e: e.origin.rank)


def _fill(
    selected: list[QueueEntry],
    pool: Iterable[QueueEntry],
    cap: int,
    used_keys: set
) -> None:
    for item in pool:
        if len(selected) >= cap:
            break
        key = selection_key(item)
        if key in used_keys:
            continue
        selected.append(item)
        used_keys.add(key)


def select_daily(
    pending: Sequence[QueueEntry],
    mcq_cap: int = DAILY_MCQ_CAP,
    open_cap: int = DAILY_OPEN_CAP
) -> DailySelection:
    """
    Select today's review items from one book's pending entries.

    Args:
        pending: Non-completed entries for a single book
        mcq_cap: Maximum choice-shaped items (MCQ + MSQ)
        open_cap: Maximum open-ended items

    Returns:
        (choice_items, open_ended_items), each in selection order
    """
    mcq_cap = max(0, mcq_cap)
    open_cap = max(0, open_cap)
    ordered = chronological(e for e in pending if not e.completed)

    pick = priority_pick(ordered)
    if pick is not None and (mcq_cap if pick.is_choice else open_cap) <= 0:
        # No room in its bucket; it competes like any other entry
        pick = None

    remaining = [e for e in ordered if e is not pick]
    choice_pool = first_per_key(e for e in remaining if e.is_choice)
    open_pool = first_per_key(e for e in remaining if not e.is_choice)

    selected_choice: list[QueueEntry] = []
    selected_open: list[QueueEntry] = []
    used_keys: set = set()

    if pick is not None:
        (selected_choice if pick.is_choice else selected_open).append(pick)
        used_keys.add(selection_key(pick))

    # A choice-shaped pick already holds one of the mcq_cap slots; the rest
    # are filled up to the full cap
    _fill(selected_choice, choice_pool, mcq_cap, used_keys)

    # Stable: keeps added_at order within each origin
    prioritized_open = sorted(open_pool, key=lambda e: e.origin.rank)
    _fill(selected_open, prioritized_open, open_cap, used_keys)

    return selected_choice, selected_open
