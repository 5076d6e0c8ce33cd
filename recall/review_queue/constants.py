"""
Review queue configuration.
"""

from __future__ import annotations

from typing import Final


# ---- Daily Caps ----

DAILY_MCQ_CAP: Final[int] = 3    # Choice-shaped review items per session
DAILY_OPEN_CAP: Final[int] = 1   # Open-ended review items per session


# ---- Follow-up Delays (days) ----

CURVEBALL_DELAY_DAYS: Final[int] = 3        # After full coverage, or after a failed curveball
CURVEBALL_AFTER_PASS_DAYS: Final[int] = 5   # After passing the spaced follow-up
SPACED_BASE_DELAY_DAYS: Final[int] = 3
SPACED_RETRY_DELAY_DAYS: Final[int] = 2

# Spaced follow-ups unlock once this many bloom categories are covered
SPACED_MIN_CATEGORIES: Final[int] = 8


# ---- Question Taxonomy ----

BLOOM_CATEGORIES: Final[list[str]] = [
    "Recall",
    "Reframe",
    "Apply",
    "Contrast",
    "Critique",
    "WhyImportant",
    "WhenUse",
    "HowWield",
]

# Categories whose curveballs are asked open-ended
OPEN_ENDED_BLOOMS: Final[frozenset[str]] = frozenset({"HowWield", "Reframe"})

QUESTION_DIFFICULTIES: Final[list[str]] = ["Easy", "Medium", "Hard"]

CURVEBALL_DIFFICULTY: Final[str] = "Hard"
DEFAULT_CURVEBALL_BLOOM: Final[str] = "HowWield"


# ---- Seed Text ----

MIN_SEED_LENGTH: Final[int] = 20
PLACEHOLDER_PHRASES: Final[tuple[str, ...]] = (
    "all of the above",
    "none of the above",
    "both a and b",
    "option 1",
    "option one",
    "placeholder",
)
