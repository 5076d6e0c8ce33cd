"""
Metric computations for review dashboards.
"""

from __future__ import annotations

from typing import Tuple

import pandas as pd

from recall.analytics.constants import ORIGIN_LABELS


def build_day_index(queue_df: pd.DataFrame) -> pd.DatetimeIndex:
    """
    Build a dense UTC day index spanning the queue history.
    """
    if queue_df.empty:
        return pd.DatetimeIndex([], tz="UTC")
    start = queue_df["day_utc"].min()
    end = queue_df["day_utc"].max()
    return pd.date_range(start=start, end=end, freq="D")


def compute_pending_counts(queue_df: pd.DataFrame) -> Tuple[int, int]:
    """
    (mcq, open_ended) counts of pending entries.
    """
    if queue_df.empty:
        return 0, 0
    pending = queue_df[~queue_df["completed"].astype(bool)]
    mcq = int(pending["is_choice"].astype(bool).sum())
    return mcq, int(len(pending) - mcq)


def compute_pending_by_origin(queue_df: pd.DataFrame) -> pd.Series:
    """
    Pending counts per origin, every origin present (zero-filled).
    """
    origins = list(ORIGIN_LABELS.keys())
    if queue_df.empty:
        return pd.Series(0, index=origins, dtype="int64")
    pending = queue_df[~queue_df["completed"].astype(bool)]
    return pending["origin"].value_counts().reindex(origins, fill_value=0).astype("int64")


def compute_added_daily(queue_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Entries queued per day over the history range.
    """
    if queue_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")
    counts = queue_df.groupby("day_utc")["id"].count()
    return counts.reindex(day_index, fill_value=0).astype("int64")


def compute_due_count(memory_df: pd.DataFrame) -> int:
    if memory_df.empty:
        return 0
    return int(memory_df["is_due"].astype(bool).sum())


def compute_retained_count(memory_df: pd.DataFrame, threshold: float) -> int:
    """
    Concepts whose current retention is at or above threshold.
    """
    if memory_df.empty:
        return 0
    return int((memory_df["retention"] >= threshold).sum())


def compute_mean_retention(memory_df: pd.DataFrame) -> float:
    if memory_df.empty:
        return 0.0
    return float(memory_df["retention"].mean())
