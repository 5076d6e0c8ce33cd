"""
Print the review queue state for a book.

Usage:
    python -m scripts.maintenance.queue_report --book-id <id> [--book-title <title>]
"""

import argparse

from recall import fsrs
from recall.analytics import build_book_dashboard
from recall.analytics.constants import ORIGIN_LABELS
from recall.review_queue import SqlQueueStore, select_daily


def main():
    parser = argparse.ArgumentParser(description="Show pending review items for a book")
    parser.add_argument("--book-id", required=True, help="Book identifier")
    parser.add_argument("--book-title", default=None, help="Title for legacy rows without a book id")
    args = parser.parse_args()

    fsrs.init_db()
    store = SqlQueueStore()

    pending = store.fetch_active(args.book_id, args.book_title)
    choice, open_ended = select_daily(pending)
    # Memory states of concepts this book has queued
    book_concepts = {e.concept_id for e in store.all_entries(args.book_id)}
    states = {cid: s for cid, s in fsrs.get_all_memory_states().items() if cid in book_concepts}
    dashboard = build_book_dashboard(store, args.book_id, states)

    print("=" * 60)
    print(f"Review queue for book {args.book_id}")
    print("=" * 60)
    # Same rows as the selection, legacy rows included
    mcq_count, open_count = store.count_pending(args.book_id, args.book_title)
    print(f"Pending: {mcq_count} MCQ, {open_count} open-ended")
    for origin, label in ORIGIN_LABELS.items():
        print(f"  {label}: {sum(1 for e in pending if e.origin.value == origin)}")
    print(f"Concepts due: {dashboard.concepts_due} of {dashboard.concepts_tracked}")

    print("\nToday's selection:")
    for entry in choice + open_ended:
        print(f"  [{entry.question_shape.value}] {entry.concept_id} {entry.concept_key} ({entry.origin.value})")


if __name__ == "__main__":
    main()
