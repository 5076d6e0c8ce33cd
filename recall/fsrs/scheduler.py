"""
Scheduler - FSRS Algorithm Logic

Pure scheduling and state updates (no database calls).

Main workflow:
1. Load memory state (caller's responsibility)
2. Classify the attempt score into a Performance grade
3. Apply the transition rule for that grade
4. Return updated state + event data dict

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime
from typing import Optional, Tuple

from recall.fsrs import memory_state
from recall.fsrs.constants import (
    Performance,
    COUNTER_MAX,
    D_MAX,
    D_MIN,
    DIFFICULTY_DELTA,
    EASY_BONUS,
    EASY_GROWTH,
    EASY_THRESHOLD,
    GOOD_GROWTH,
    GOOD_THRESHOLD,
    HARD_PENALTY,
    HARD_THRESHOLD,
    INITIAL_INTERVAL,
    INITIAL_STABILITY,
    MAX_INTERVAL,
    STABILITY_MULTIPLIER,
    SUCCESS_FACTOR,
)
from recall.fsrs.memory_state import MemoryState


def classify(correct: int, total: int) -> Performance:
    """
    Convert an attempt score into a Performance grade.

    Ratio bands:
    - [0.00, 0.60) -> AGAIN
    - [0.60, 0.75) -> HARD
    - [0.75, 0.95) -> GOOD
    - [0.95, 1.00] -> EASY

    An empty attempt (total <= 0) grades as GOOD.
    """
    if total <= 0:
        return Performance.GOOD

    correct = max(0, min(correct, total))
    ratio = correct / total

    if ratio < HARD_THRESHOLD:
        return Performance.AGAIN
    if ratio < GOOD_THRESHOLD:
        return Performance.HARD
    if ratio < EASY_THRESHOLD:
        return Performance.GOOD
    return Performance.EASY


def _saturating_inc(counter: int) -> int:
    return min(COUNTER_MAX, counter + 1)


def _clip_difficulty(value: float) -> float:
    return max(D_MIN, min(D_MAX, value))


def _success_factor(repetitions: int, performance: Performance) -> float:
    return 1.0 + repetitions * SUCCESS_FACTOR[performance]


def advance(
    state: MemoryState,
    performance: Performance,
    now: Optional[datetime] = None
) -> MemoryState:
    """
    Apply one graded review to a memory state.

    Transition rules:
    - AGAIN: reset interval and stability, count a lapse, reset repetitions
    - HARD: shrink interval (floor 1 day), stability * 0.9
    - GOOD: interval * 2.5 * (1 + 0.1 * reps), stability * 1.2
    - EASY: interval * 3.0 * (1 + 0.15 * reps) * 1.3, stability * 1.5

    Difficulty drifts up on AGAIN/HARD and down on EASY. It does not feed
    back into interval growth.

    Args:
        state: Current memory state (not modified)
        performance: Graded outcome
        now: Review timestamp (defaults to now)

    Returns:
        New MemoryState scheduled from `now`
    """
    if now is None:
        now = memory_state.utc_now()

    difficulty = _clip_difficulty(state.difficulty + DIFFICULTY_DELTA[performance])

    if performance == Performance.AGAIN:
        interval = INITIAL_INTERVAL
        stability = INITIAL_STABILITY
        repetitions = 0
        lapses = _saturating_inc(state.lapses)

    elif performance == Performance.HARD:
        interval = max(INITIAL_INTERVAL, state.interval * HARD_PENALTY)
        stability = state.stability * STABILITY_MULTIPLIER[performance]
        repetitions = _saturating_inc(state.repetitions)
        lapses = state.lapses

    elif performance == Performance.GOOD:
        factor = _success_factor(state.repetitions, performance)
        interval = min(MAX_INTERVAL, state.interval * GOOD_GROWTH * factor)
        stability = state.stability * STABILITY_MULTIPLIER[performance]
        repetitions = _saturating_inc(state.repetitions)
        lapses = state.lapses
        # GOOD keeps difficulty as-is
        difficulty = state.difficulty

    else:
        factor = _success_factor(state.repetitions, performance)
        interval = min(MAX_INTERVAL, state.interval * EASY_GROWTH * factor * EASY_BONUS)
        stability = state.stability * STABILITY_MULTIPLIER[performance]
        repetitions = _saturating_inc(state.repetitions)
        lapses = state.lapses

    return replace(
        state,
        stability=stability,
        difficulty=difficulty,
        interval=interval,
        repetitions=repetitions,
        lapses=lapses,
        last_review_at=now,
        next_review_at=memory_state.add_days(now, interval),
    )


def process_review(
    state: MemoryState,
    performance: Performance,
    timestamp: Optional[datetime] = None
) -> Tuple[MemoryState, dict]:
    """
    Process a review and return updated state + event data.

    No database calls. Caller is responsible for:
    1. Loading the state
    2. Saving the state after review
    3. Persisting the event

    Returns:
        Tuple of (updated_state, event_data_dict)
        event_data_dict is ready to pass to database.log_review_event()
    """
    if timestamp is None:
        timestamp = memory_state.utc_now()

    retention_before = memory_state.retention(state, timestamp)
    updated = advance(state, performance, timestamp)

    event_data = {
        'timestamp': timestamp,
        'performance': int(performance),
        'stability_before': state.stability,
        'difficulty_before': state.difficulty,
        'interval_before': state.interval,
        'retention_before': retention_before,
        'stability_after': updated.stability,
        'difficulty_after': updated.difficulty,
        'interval_after': updated.interval,
        'next_review_at': updated.next_review_at,
    }

    return updated, event_data
