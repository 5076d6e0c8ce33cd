"""
Queue Store - Durable collection of review queue entries

The selector and ingestion only need four operations from storage: insert
(with the active-duplicate check), fetch the active entries of a book, check
for an active entry, and mark a batch completed. Every mutation runs under
the store's write lock so ingestion and completion are serialized.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Iterable, Optional, Sequence, Tuple
import threading

from sqlalchemy import and_, or_

from recall.fsrs.database import get_session
from recall.fsrs.memory_state import as_utc
from recall.fsrs.models import ReviewQueueItemModel
from recall.review_queue import dedup
from recall.review_queue.queue_types import Origin, QuestionShape, QueueEntry
from recall.review_queue.selector import chronological, entries_for_book
from recall.review_queue.statistics import count_pending


class QueueStore(ABC):
    """
    Abstract review queue storage.

    Subclasses should implement:
    - add_unique()
    - has_active()
    - has_pending_origin()
    - fetch_active()
    - mark_completed()
    - all_entries()
    """

    @abstractmethod
    def add_unique(self, entry: QueueEntry) -> bool:
        """
        Insert entry unless an active duplicate exists.

        Returns:
            True if inserted, False if skipped as a duplicate
        """

    @abstractmethod
    def has_active(
        self,
        concept_id: str,
        concept_key: str,
        question_shape: QuestionShape
    ) -> bool:
        """Check for an active entry on (concept_id, concept_key, shape)."""

    @abstractmethod
    def has_pending_origin(
        self,
        concept_id: str,
        origin: Origin,
        book_id: Optional[str] = None
    ) -> bool:
        """Check for an active entry of the given origin for a concept."""

    @abstractmethod
    def fetch_active(
        self,
        book_id: str,
        book_title: Optional[str] = None
    ) -> list[QueueEntry]:
        """Snapshot of a book's active entries, oldest first."""

    @abstractmethod
    def mark_completed(self, entries: Sequence[QueueEntry]) -> list[QueueEntry]:
        """
        Mark a batch completed, all-or-nothing.

        Raises:
            ValueError: if any entry is unknown (nothing is marked)
        """

    @abstractmethod
    def all_entries(self, book_id: Optional[str] = None) -> list[QueueEntry]:
        """Every entry including completed history, oldest first."""

    def count_pending(
        self,
        book_id: str,
        book_title: Optional[str] = None
    ) -> Tuple[int, int]:
        """(mcq_count, open_ended_count) of a book's active entries."""
        return count_pending(self.fetch_active(book_id, book_title), book_id, book_title)


def _unique_ids(entries: Iterable[QueueEntry]) -> list[str]:
    return list(dict.fromkeys(e.id for e in entries))


class InMemoryQueueStore(QueueStore):
    """
    Dict-backed store for tests and single-process hosts.
    """

    def __init__(self, entries: Iterable[QueueEntry] = ()):
        self._entries: dict[str, QueueEntry] = {}
        self._lock = threading.Lock()
        for entry in entries:
            self.add_unique(entry)

    def add_unique(self, entry: QueueEntry) -> bool:
        with self._lock:
            if entry.id in self._entries:
                return False
            if dedup.has_active_duplicate(
                self._entries.values(),
                entry.concept_id,
                entry.concept_key,
                entry.question_shape
            ):
                return False
            self._entries[entry.id] = replace(entry, added_at=as_utc(entry.added_at))
            return True

    def has_active(self, concept_id, concept_key, question_shape) -> bool:
        with self._lock:
            return dedup.has_active_duplicate(
                self._entries.values(), concept_id, concept_key, question_shape
            )

    def has_pending_origin(self, concept_id, origin, book_id=None) -> bool:
        with self._lock:
            return dedup.has_pending_origin(self._entries.values(), concept_id, origin, book_id)

    def fetch_active(self, book_id, book_title=None) -> list[QueueEntry]:
        with self._lock:
            snapshot = list(self._entries.values())
        return chronological(entries_for_book(snapshot, book_id, book_title))

    def mark_completed(self, entries):
        ids = _unique_ids(entries)
        with self._lock:
            missing = [entry_id for entry_id in ids if entry_id not in self._entries]
            if missing:
                raise ValueError(f"Unknown review queue entries: {', '.join(missing)}")
            for entry_id in ids:
                self._entries[entry_id] = replace(self._entries[entry_id], completed=True)
            return [self._entries[entry_id] for entry_id in ids]

    def all_entries(self, book_id=None) -> list[QueueEntry]:
        with self._lock:
            snapshot = list(self._entries.values())
        if book_id is not None:
            snapshot = [e for e in snapshot if e.book_id == book_id]
        return chronological(snapshot)


# One writer at a time against the shared database
_SQL_WRITE_LOCK = threading.Lock()


def _to_entry(row: ReviewQueueItemModel) -> QueueEntry:
    return QueueEntry(
        id=row.id,
        concept_id=row.concept_id,
        book_id=row.book_id,
        question_shape=QuestionShape(row.question_shape),
        concept_key=row.concept_key,
        origin=Origin(row.origin),
        added_at=as_utc(row.added_at),
        completed=bool(row.completed),
        book_title=row.book_title,
        concept_title=row.concept_title,
        source_text=row.source_text or "",
    )


def _to_row(entry: QueueEntry) -> ReviewQueueItemModel:
    return ReviewQueueItemModel(
        id=entry.id,
        concept_id=entry.concept_id,
        book_id=entry.book_id,
        book_title=entry.book_title,
        concept_title=entry.concept_title,
        question_shape=entry.question_shape.value,
        concept_key=entry.concept_key,
        origin=entry.origin.value,
        source_text=entry.source_text,
        added_at=as_utc(entry.added_at),
        completed=entry.completed,
    )


class SqlQueueStore(QueueStore):
    """
    SQLAlchemy-backed store on the review_queue table.

    Each operation opens its own session; each mutation is one transaction.
    """

    def _active_query(self, session, concept_id, concept_key, question_shape):
        return session.query(ReviewQueueItemModel.id).filter(
            ReviewQueueItemModel.completed.is_(False),
            ReviewQueueItemModel.concept_id == concept_id,
            ReviewQueueItemModel.concept_key == concept_key,
            ReviewQueueItemModel.question_shape == QuestionShape(question_shape).value,
        )

    def add_unique(self, entry: QueueEntry) -> bool:
        with _SQL_WRITE_LOCK:
            session = get_session()
            try:
                if session.get(ReviewQueueItemModel, entry.id) is not None:
                    return False
                duplicate = self._active_query(
                    session, entry.concept_id, entry.concept_key, entry.question_shape
                ).first()
                if duplicate is not None:
                    return False
                session.add(_to_row(entry))
                session.commit()
                return True
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()

    def has_active(self, concept_id, concept_key, question_shape) -> bool:
        session = get_session()
        try:
            return self._active_query(session, concept_id, concept_key, question_shape).first() is not None
        finally:
            session.close()

    def has_pending_origin(self, concept_id, origin, book_id=None) -> bool:
        session = get_session()
        try:
            query = session.query(ReviewQueueItemModel.id).filter(
                ReviewQueueItemModel.completed.is_(False),
                ReviewQueueItemModel.concept_id == concept_id,
                ReviewQueueItemModel.origin == Origin(origin).value,
            )
            if book_id is not None:
                query = query.filter(ReviewQueueItemModel.book_id == book_id)
            return query.first() is not None
        finally:
            session.close()

    def fetch_active(self, book_id, book_title=None) -> list[QueueEntry]:
        session = get_session()
        try:
            book_match = ReviewQueueItemModel.book_id == book_id
            if book_title is not None:
                book_match = or_(
                    book_match,
                    and_(
                        ReviewQueueItemModel.book_id.is_(None),
                        ReviewQueueItemModel.book_title == book_title,
                    )
                )
            rows = session.query(ReviewQueueItemModel).filter(
                ReviewQueueItemModel.completed.is_(False),
                book_match,
            ).order_by(ReviewQueueItemModel.added_at).all()
            return chronological(_to_entry(row) for row in rows)
        finally:
            session.close()

    def mark_completed(self, entries):
        ids = _unique_ids(entries)
        if not ids:
            return []

        with _SQL_WRITE_LOCK:
            session = get_session()
            try:
                rows = session.query(ReviewQueueItemModel).filter(
                    ReviewQueueItemModel.id.in_(ids)
                ).all()
                by_id = {row.id: row for row in rows}
                missing = [entry_id for entry_id in ids if entry_id not in by_id]
                if missing:
                    raise ValueError(f"Unknown review queue entries: {', '.join(missing)}")

                for row in rows:
                    row.completed = True
                session.commit()
                print(f"[REVIEW QUEUE] Marked {len(ids)} review items as completed")
                return [_to_entry(by_id[entry_id]) for entry_id in ids]
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()

    def all_entries(self, book_id=None) -> list[QueueEntry]:
        session = get_session()
        try:
            query = session.query(ReviewQueueItemModel)
            if book_id is not None:
                query = query.filter(ReviewQueueItemModel.book_id == book_id)
            rows = query.order_by(ReviewQueueItemModel.added_at).all()
            return chronological(_to_entry(row) for row in rows)
        finally:
            session.close()
