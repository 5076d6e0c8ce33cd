"""
Constants for review analytics.
"""

from __future__ import annotations

from typing import Final

from recall.review_queue.queue_types import Origin


QUEUE_COLUMNS: Final[list[str]] = [
    "id", "concept_id", "question_shape", "origin", "added_at", "completed", "is_choice", "day_utc",
]

MEMORY_COLUMNS: Final[list[str]] = [
    "concept_id", "retention", "is_due", "interval", "lapses",
]

ORIGIN_LABELS: Final[dict[str, str]] = {
    Origin.CURVEBALL.value: "Curveballs",
    Origin.SPACED_FOLLOW_UP.value: "Spaced follow-ups",
    Origin.MISTAKE.value: "Mistakes",
}

# Retention at or above this counts as "retained" on the dashboard
RETAINED_THRESHOLD: Final[float] = 0.9
