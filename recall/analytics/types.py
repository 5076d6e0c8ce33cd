"""
Types for review analytics dashboards.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class BookDashboardData:
    """
    Precomputed review metrics and series for one book.
    """
    book_id: str
    pending_mcq: int
    pending_open_ended: int
    pending_by_origin: pd.Series
    added_daily: pd.Series
    concepts_tracked: int
    concepts_due: int
    concepts_retained: int
    mean_retention: float
