"""
Read-side aggregates for review queue badges.
"""

from __future__ import annotations
from typing import Iterable, Optional, Tuple

from recall.review_queue.queue_types import QueueEntry
from recall.review_queue.selector import entries_for_book


def count_pending(
    entries: Iterable[QueueEntry],
    book_id: str,
    book_title: Optional[str] = None
) -> Tuple[int, int]:
    """
    Count non-completed entries for a book, split by shape.

    Returns:
        (mcq_count, open_ended_count); MSQ entries count as mcq
    """
    pending = entries_for_book(entries, book_id, book_title)
    mcq_count = sum(1 for e in pending if e.is_choice)
    return mcq_count, len(pending) - mcq_count
