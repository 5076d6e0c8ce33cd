"""
Service layer to assemble the review dashboard for a book.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional

from recall.analytics.constants import RETAINED_THRESHOLD
from recall.analytics.metrics import (
    build_day_index,
    compute_added_daily,
    compute_due_count,
    compute_mean_retention,
    compute_pending_by_origin,
    compute_pending_counts,
    compute_retained_count,
)
from recall.analytics.queries import load_memory_df, load_queue_df
from recall.analytics.types import BookDashboardData
from recall.fsrs.memory_state import MemoryState, utc_now
from recall.review_queue.store import QueueStore


def build_book_dashboard(
    store: QueueStore,
    book_id: str,
    states: Mapping[str, MemoryState],
    now: Optional[datetime] = None
) -> BookDashboardData:
    """
    Build all KPI values and series for one book's review page.

    Args:
        store: Queue store holding the book's entries
        book_id: Book to report on
        states: Memory states of the book's concepts, keyed by concept id
        now: Reference time for retention and due-ness
    """
    if now is None:
        now = utc_now()

    queue_df = load_queue_df(store, book_id)
    memory_df = load_memory_df(states, now)
    day_index = build_day_index(queue_df)

    pending_mcq, pending_open = compute_pending_counts(queue_df)

    return BookDashboardData(
        book_id=book_id,
        pending_mcq=pending_mcq,
        pending_open_ended=pending_open,
        pending_by_origin=compute_pending_by_origin(queue_df),
        added_daily=compute_added_daily(queue_df, day_index),
        concepts_tracked=len(memory_df),
        concepts_due=compute_due_count(memory_df),
        concepts_retained=compute_retained_count(memory_df, RETAINED_THRESHOLD),
        mean_retention=compute_mean_retention(memory_df),
    )
