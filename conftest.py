"""
Shared pytest fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from recall.fsrs import database
from recall.review_queue.queue_types import Origin, QuestionShape, QueueEntry


T0 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return T0


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a fresh SQLite file with the schema created."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'reviews.sqlite'}")
    monkeypatch.delenv("TEST_MODE", raising=False)
    database.dispose_engines()
    database.init_db()
    yield
    database.dispose_engines()


@pytest.fixture
def make_entry():
    """Factory for queue entries; `minutes` offsets added_at from T0."""
    def _make(
        concept_id="b1i1",
        concept_key="Recall-Easy",
        shape=QuestionShape.SINGLE_SELECT,
        origin=Origin.MISTAKE,
        minutes=0,
        book_id="book-1",
        **kwargs
    ):
        return QueueEntry(
            concept_id=concept_id,
            book_id=book_id,
            question_shape=shape,
            concept_key=concept_key,
            origin=origin,
            added_at=T0 + timedelta(minutes=minutes),
            **kwargs
        )
    return _make
