"""
FSRS - Forgetting-curve scheduler for book ideas

Main API for per-concept memory scheduling.

This package implements a compact spaced repetition model with:
- Importance-seeded initial state (Foundation ideas start more stable)
- Four graded transitions (AGAIN, HARD, GOOD, EASY)
- Exponential forgetting curve: R = exp(-Δt/S)
- Interval growth capped at one year

Quick start:
    from recall import fsrs

    # Initialize database
    fsrs.init_db()

    # Grade an attempt (algorithm only, no DB calls)
    state = fsrs.initialize(fsrs.ImportanceTier.FOUNDATION)
    state = fsrs.advance(state, fsrs.classify(7, 8))

    # Persisted flow
    fsrs.review_concept("b1i1", correct=7, total=8)
"""

# Core scheduler API (algorithm logic)
from recall.fsrs.scheduler import advance, classify, process_review

# Memory state
from recall.fsrs.memory_state import (
    MemoryState,
    calculate_retention,
    initialize,
    is_due,
    retention,
)

# Database API
from recall.fsrs.database import (
    init_db,
    reset_db,
    is_test_mode,
    load_memory_state,
    get_or_create_memory_state,
    save_memory_state,
    get_all_memory_states,
    get_due_concept_ids,
    log_review_event,
    get_recent_events,
)

# Persisted review flow
from recall.fsrs.scheduling import get_due_concepts, review_concept

# Constants and parameters
from recall.fsrs.constants import (
    ImportanceTier,
    Performance,
    INITIAL_STABILITY,
    MAX_INTERVAL,
    D_MIN,
    D_MAX,
    TIER_SEEDS,
)


__all__ = [
    # Core algorithm
    "advance",
    "classify",
    "process_review",

    # Memory state
    "MemoryState",
    "calculate_retention",
    "initialize",
    "is_due",
    "retention",

    # Database operations
    "init_db",
    "reset_db",
    "is_test_mode",
    "load_memory_state",
    "get_or_create_memory_state",
    "save_memory_state",
    "get_all_memory_states",
    "get_due_concept_ids",
    "log_review_event",
    "get_recent_events",

    # Persisted flow
    "get_due_concepts",
    "review_concept",

    # Enums
    "ImportanceTier",
    "Performance",

    # Parameters
    "INITIAL_STABILITY",
    "MAX_INTERVAL",
    "D_MIN",
    "D_MAX",
    "TIER_SEEDS",
]
