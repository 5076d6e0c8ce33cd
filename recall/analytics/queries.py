"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping

import pandas as pd

from recall.analytics.constants import MEMORY_COLUMNS, QUEUE_COLUMNS
from recall.fsrs.memory_state import MemoryState, is_due, retention
from recall.review_queue.store import QueueStore


def load_queue_df(store: QueueStore, book_id: str) -> pd.DataFrame:
    """
    Load a book's queue history (pending and completed) into a dataframe.
    """
    entries = store.all_entries(book_id)
    if not entries:
        return pd.DataFrame(columns=QUEUE_COLUMNS)

    df = pd.DataFrame([
        {
            "id": e.id,
            "concept_id": e.concept_id,
            "question_shape": e.question_shape.value,
            "origin": e.origin.value,
            "added_at": e.added_at,
            "completed": e.completed,
            "is_choice": e.is_choice,
        }
        for e in entries
    ])
    df["added_at"] = pd.to_datetime(df["added_at"], utc=True)
    df["day_utc"] = df["added_at"].dt.floor("D")
    return df.sort_values("added_at").reset_index(drop=True)


def load_memory_df(states: Mapping[str, MemoryState], now: datetime) -> pd.DataFrame:
    """
    Snapshot memory states with retention and due-ness at `now`.
    """
    if not states:
        return pd.DataFrame(columns=MEMORY_COLUMNS)

    return pd.DataFrame([
        {
            "concept_id": concept_id,
            "retention": retention(state, now),
            "is_due": is_due(state, now),
            "interval": state.interval,
            "lapses": state.lapses,
        }
        for concept_id, state in states.items()
    ])
