"""
FSRS Constants and Parameters

All tunable parameters for the idea scheduler in one place.
"""

from enum import Enum, IntEnum


# ---- Performance Grades ----

class Performance(IntEnum):
    """Graded outcome of a test attempt on one concept."""
    AGAIN = 1   # Failed, needs immediate review
    HARD = 2    # Struggled but mostly correct
    GOOD = 3    # Normal performance
    EASY = 4    # Knew it well


# ---- Concept Importance ----

class ImportanceTier(str, Enum):
    """Declared importance of a concept within its book."""
    FOUNDATION = "Foundation"
    BUILDING_BLOCK = "Building Block"
    ENHANCEMENT = "Enhancement"
    UNSET = "Unset"


# ---- Global Constants ----

INITIAL_STABILITY = 1.0   # Stability after a lapse (days)
INITIAL_INTERVAL = 1.0    # First interval for every new state (days)
MAX_INTERVAL = 365.0      # Never schedule further than a year out
D_MIN = 0.1               # Minimum difficulty
D_MAX = 1.0               # Maximum difficulty
COUNTER_MAX = 2**32 - 1   # Saturation point for repetitions/lapses

SECONDS_PER_DAY = 86400.0


# ---- Transition Parameters ----

HARD_PENALTY = 0.6        # Interval multiplier on HARD
EASY_BONUS = 1.3          # Extra interval multiplier on EASY

GOOD_GROWTH = 2.5
EASY_GROWTH = 3.0

# Per-repetition boost to interval growth
SUCCESS_FACTOR = {
    Performance.GOOD: 0.10,
    Performance.EASY: 0.15,
}

STABILITY_MULTIPLIER = {
    Performance.HARD: 0.9,
    Performance.GOOD: 1.2,
    Performance.EASY: 1.5,
}

DIFFICULTY_DELTA = {
    Performance.AGAIN: +0.2,
    Performance.HARD: +0.1,
    Performance.GOOD: 0.0,
    Performance.EASY: -0.1,
}


# ---- Score Thresholds ----
# Lower bound of the correctness ratio for each grade

HARD_THRESHOLD = 0.60
GOOD_THRESHOLD = 0.75
EASY_THRESHOLD = 0.95


# ---- Seeds by Importance ----
# (difficulty, stability) for a freshly initialized state

TIER_SEEDS = {
    ImportanceTier.FOUNDATION: (0.2, 1.5),
    ImportanceTier.BUILDING_BLOCK: (0.3, 1.0),
    ImportanceTier.ENHANCEMENT: (0.4, 0.8),
    ImportanceTier.UNSET: (0.3, 1.0),
}
