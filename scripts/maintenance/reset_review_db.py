"""
Reset the review database.

DANGEROUS: Drops memory states, review events and every review queue item,
pending or completed. Meant for local and test databases.

Usage:
    python -m scripts.maintenance.reset_review_db [--yes]
"""

import argparse

from recall import fsrs
from recall.review_queue import SqlQueueStore


def main():
    parser = argparse.ArgumentParser(description="Drop and recreate the review tables")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    fsrs.init_db()
    states = fsrs.get_all_memory_states()
    queue_items = SqlQueueStore().all_entries()
    pending = sum(1 for e in queue_items if not e.completed)

    target = "TEST database" if fsrs.is_test_mode() else "database"
    print(f"Resetting the review {target} will delete:")
    print(f"  {len(states)} memory states and their review events")
    print(f"  {len(queue_items)} review queue items ({pending} still pending)")

    if not args.yes:
        response = input("Type 'yes' to confirm: ")
        if response.lower() != "yes":
            print("Cancelled. No changes made.")
            return

    fsrs.reset_db()
    print("[FSRS] Review database reset")


if __name__ == "__main__":
    main()
