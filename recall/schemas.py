"""
Pydantic models for the collaborators feeding the review core.

The grading collaborator sends GradedAttempt payloads; the concept registry
stores ConceptRecord documents in MongoDB.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from recall.fsrs.constants import ImportanceTier
from recall.review_queue.queue_types import QuestionShape, make_concept_key


# ---- Grading Input ----

class GradedResponse(BaseModel):
    """One graded answer within a test attempt."""
    concept_id: str = Field(..., description="Concept the question tests")
    is_correct: bool
    question_id: Optional[str] = None
    question_shape: Optional[QuestionShape] = None

    # Either the ready-made key or the parts it is built from
    concept_key: Optional[str] = Field(default=None, description='e.g. "Apply-Medium"')
    bloom_category: Optional[str] = None
    difficulty: Optional[str] = None

    question_text: str = ""

    def resolve_concept_key(self) -> Optional[str]:
        """
        Coarse dedup bucket for this question, or None if it can't be resolved.
        """
        if self.concept_key:
            return self.concept_key
        if self.bloom_category and self.difficulty:
            return make_concept_key(self.bloom_category, self.difficulty)
        return None


class GradedAttempt(BaseModel):
    """A graded test attempt for one book."""
    book_id: str
    book_title: Optional[str] = None
    attempted_at: Optional[datetime] = None
    responses: list[GradedResponse] = Field(default_factory=list)

    @property
    def incorrect_responses(self) -> list[GradedResponse]:
        return [r for r in self.responses if not r.is_correct]

    def score_for(self, concept_id: str) -> tuple[int, int]:
        """(correct, total) for one concept within this attempt."""
        answers = [r for r in self.responses if r.concept_id == concept_id]
        return sum(1 for r in answers if r.is_correct), len(answers)


# ---- Concept Registry ----

class ConceptRecord(BaseModel):
    """
    A single extracted idea in the concept registry.

    One document per concept_id (book-scoped ids such as "b1i1").
    """
    concept_id: str = Field(..., description="Stable concept identifier")
    title: str = ""
    book_id: Optional[str] = None
    book_title: Optional[str] = None
    importance: ImportanceTier = Field(default=ImportanceTier.UNSET)
