"""
SQLAlchemy ORM Models for the Review Database

Defines the memory state, review event and review queue tables.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MemoryStateModel(Base):
    """
    Persistent memory state for a single concept.
    """
    __tablename__ = 'memory_state'

    concept_id = Column(String(255), primary_key=True, nullable=False)

    # Forgetting curve parameters
    stability = Column(Float, nullable=False)
    difficulty = Column(Float, nullable=False)
    interval = Column(Float, nullable=False)

    # Review tracking
    repetitions = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)
    last_review_at = Column(DateTime(timezone=True), nullable=False)
    next_review_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<MemoryState({self.concept_id}, next={self.next_review_at})>"


class ReviewEventModel(Base):
    """
    Log entry for a single graded review of a concept.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    concept_id = Column(String(255), nullable=False, index=True)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    performance = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY
    correct = Column(Integer, nullable=True)
    total = Column(Integer, nullable=True)

    # State before review
    stability_before = Column(Float, nullable=True)
    difficulty_before = Column(Float, nullable=True)
    interval_before = Column(Float, nullable=True)
    retention_before = Column(Float, nullable=True)

    # State after review
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    interval_after = Column(Float, nullable=False)
    next_review_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.concept_id}, performance={self.performance})>"


class ReviewQueueItemModel(Base):
    """
    One pending (or completed) review obligation.

    Append-only: rows are flagged completed, never deleted.
    """
    __tablename__ = 'review_queue'

    id = Column(String(36), primary_key=True)
    concept_id = Column(String(255), nullable=False)
    book_id = Column(String(255), nullable=True)  # NULL for legacy rows
    book_title = Column(String(512), nullable=True)
    concept_title = Column(String(512), nullable=True)

    question_shape = Column(String(20), nullable=False)
    concept_key = Column(String(100), nullable=False)
    origin = Column(String(20), nullable=False)
    source_text = Column(String, nullable=False, default="")

    added_at = Column(DateTime(timezone=True), nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index('idx_queue_active_key', 'concept_id', 'concept_key', 'question_shape', 'completed'),
        Index('idx_queue_book', 'book_id', 'completed'),
    )

    def __repr__(self):
        return f"<ReviewQueueItem({self.id}, {self.concept_id}/{self.concept_key}, {self.origin})>"
