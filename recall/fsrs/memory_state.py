"""
Memory State - Per-Concept Forgetting Curve

Defines the memory state of a single concept and the quantities derived
from it.

Key concepts:
- Stability (S): How slowly memory decays (in days)
- Difficulty (D): How hard the concept is for this learner (0.1-1.0 scale)
- Interval (I): Days between the last review and the next one
- Retention (R): Probability of successful recall at time t
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import math

from recall.fsrs.constants import (
    ImportanceTier,
    INITIAL_INTERVAL,
    SECONDS_PER_DAY,
    TIER_SEEDS,
)


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single concept.

    Invariant: next_review_at == last_review_at + interval days.
    """
    stability: float  # S, in days
    difficulty: float  # D, range 0.1-1.0
    interval: float  # days until next review, range 1-365

    # Review tracking
    repetitions: int  # Successful reviews since the last lapse
    lapses: int  # Total failures, never reset
    last_review_at: datetime
    next_review_at: datetime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalize to UTC. Naive values are taken as UTC already.

    SQLite keeps only the wall-clock time, so every timestamp is written
    and read back through this function.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_between(start: datetime, end: datetime) -> float:
    """Elapsed days from start to end (negative if end is earlier)."""
    return (as_utc(end) - as_utc(start)).total_seconds() / SECONDS_PER_DAY


def add_days(start: datetime, days: float) -> datetime:
    return start + timedelta(seconds=days * SECONDS_PER_DAY)


def initialize(
    tier: ImportanceTier = ImportanceTier.UNSET,
    now: Optional[datetime] = None
) -> MemoryState:
    """
    Initialize state for a concept that has never been graded.

    Difficulty and stability are seeded from the concept's importance:
    foundational ideas start easier and more stable.

    Args:
        tier: Importance tier of the concept
        now: Creation timestamp (defaults to now)

    Returns:
        New MemoryState due one day after creation
    """
    if now is None:
        now = utc_now()

    difficulty, stability = TIER_SEEDS.get(tier, TIER_SEEDS[ImportanceTier.UNSET])

    return MemoryState(
        stability=stability,
        difficulty=difficulty,
        interval=INITIAL_INTERVAL,
        repetitions=0,
        lapses=0,
        last_review_at=now,
        next_review_at=add_days(now, INITIAL_INTERVAL),
    )


def calculate_retention(
    stability: float,
    days_since_review: float
) -> float:
    """
    Calculate retention using exponential decay.

    Formula: R = exp(-Δt / S), clamped to [0, 1]

    Interpretation:
    - Immediately after review: R = 1.0
    - As time passes: R decays smoothly
    - A timestamp before the last review counts as no elapsed time

    Args:
        stability: Current stability in days
        days_since_review: Time since last review in days

    Returns:
        Retention between 0 and 1
    """
    if days_since_review <= 0:
        return 1.0
    if stability <= 0:
        return 0.0

    return max(0.0, min(1.0, math.exp(-days_since_review / stability)))


def retention(state: MemoryState, now: Optional[datetime] = None) -> float:
    """Probability the learner still recalls the concept at `now`."""
    if now is None:
        now = utc_now()
    return calculate_retention(state.stability, days_between(state.last_review_at, now))


def is_due(state: MemoryState, now: Optional[datetime] = None) -> bool:
    """A concept is due once its next review time has been reached."""
    if now is None:
        now = utc_now()
    return as_utc(now) >= as_utc(state.next_review_at)
