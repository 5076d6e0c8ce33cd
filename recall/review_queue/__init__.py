"""Review queue: mistake capture, dedup and daily selection."""

from recall.review_queue.queue_types import (
    Origin,
    QuestionShape,
    QueueEntry,
    make_concept_key,
)
from recall.review_queue.selector import entries_for_book, select_daily
from recall.review_queue.statistics import count_pending
from recall.review_queue.store import InMemoryQueueStore, QueueStore, SqlQueueStore

__all__ = [
    "Origin",
    "QuestionShape",
    "QueueEntry",
    "make_concept_key",
    "entries_for_book",
    "select_daily",
    "count_pending",
    "InMemoryQueueStore",
    "QueueStore",
    "SqlQueueStore",
]
