"""
Typed queue models shared across ingestion, selection and storage.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
import uuid


class QuestionShape(str, Enum):
    """Answer format of a question."""
    SINGLE_SELECT = "MCQ"
    MULTI_SELECT = "MSQ"
    OPEN_ENDED = "OpenEnded"

    @property
    def is_choice(self) -> bool:
        return self is not QuestionShape.OPEN_ENDED


class Origin(str, Enum):
    """Why an entry was queued."""
    CURVEBALL = "curveball"
    SPACED_FOLLOW_UP = "spaced_follow_up"
    MISTAKE = "mistake"

    @property
    def rank(self) -> int:
        """Selection priority, lower first."""
        return ORIGIN_RANK[self]


ORIGIN_RANK = {
    Origin.CURVEBALL: 0,
    Origin.SPACED_FOLLOW_UP: 1,
    Origin.MISTAKE: 2,
}


def make_concept_key(bloom_category: str, difficulty: str) -> str:
    """
    Build the coarse dedup bucket, e.g. "Apply-Medium".
    """
    return f"{bloom_category}-{difficulty}"


def bloom_of(concept_key: str) -> str:
    return concept_key.split("-", 1)[0]


def new_entry_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class QueueEntry:
    """
    One review candidate.

    Entries are immutable values; completion is recorded by the store.
    """
    concept_id: str
    book_id: Optional[str]
    question_shape: QuestionShape
    concept_key: str
    origin: Origin
    added_at: datetime
    completed: bool = False
    id: str = field(default_factory=new_entry_id)

    # Context for the test-assembly collaborator and legacy matching
    book_title: Optional[str] = None
    concept_title: Optional[str] = None
    source_text: str = ""

    @property
    def is_choice(self) -> bool:
        return self.question_shape.is_choice

    @property
    def bloom_category(self) -> str:
        return bloom_of(self.concept_key)


# (concept_id, concept_key, question_shape)
ActiveKey = Tuple[str, str, QuestionShape]

# (concept_id, concept_key)
SelectionKey = Tuple[str, str]
