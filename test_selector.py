"""
Tests for daily review queue selection.
"""

from recall.review_queue import (
    Origin,
    QuestionShape,
    count_pending,
    entries_for_book,
    select_daily,
)

MCQ = QuestionShape.SINGLE_SELECT
MSQ = QuestionShape.MULTI_SELECT
OPEN = QuestionShape.OPEN_ENDED


def _ids(entries):
    return [e.id for e in entries]


def test_duplicate_mistake_and_curveball(make_entry):
    first = make_entry("conceptA", "Apply-Medium", MCQ, minutes=0)
    dup = make_entry("conceptA", "Apply-Medium", MCQ, minutes=5)
    curveball = make_entry("conceptB", "HowWield-Hard", OPEN, Origin.CURVEBALL, minutes=10)

    choice, open_ended = select_daily([first, dup, curveball])

    assert _ids(choice) == [first.id]
    assert _ids(open_ended) == [curveball.id]


def test_three_earliest_mistakes_selected(make_entry):
    entries = [make_entry(f"c{i}", "Recall-Easy", MCQ, minutes=i) for i in range(5)]

    choice, open_ended = select_daily(list(reversed(entries)), mcq_cap=3)

    assert _ids(choice) == _ids(entries[:3])
    assert open_ended == []


def test_curveball_beats_spaced_follow_up(make_entry):
    spaced = make_entry("c1", "Apply-Medium", OPEN, Origin.SPACED_FOLLOW_UP, minutes=0)
    curveball = make_entry("c2", "HowWield-Hard", OPEN, Origin.CURVEBALL, minutes=30)

    _, open_ended = select_daily([spaced, curveball])

    assert _ids(open_ended) == [curveball.id]


def test_spaced_follow_up_preferred_over_open_mistake(make_entry):
    mistake = make_entry("c1", "Reframe-Hard", OPEN, Origin.MISTAKE, minutes=0)
    spaced = make_entry("c2", "Apply-Medium", OPEN, Origin.SPACED_FOLLOW_UP, minutes=30)

    _, open_ended = select_daily([mistake, spaced])

    assert _ids(open_ended) == [spaced.id]


def test_choice_curveball_uses_mcq_slot(make_entry):
    curveball = make_entry("c9", "Analyze-Hard", MSQ, Origin.CURVEBALL, minutes=60)
    mistakes = [make_entry(f"c{i}", "Recall-Easy", MCQ, minutes=i) for i in range(4)]

    choice, open_ended = select_daily(mistakes + [curveball], mcq_cap=3)

    assert len(choice) == 3
    assert choice[0].id == curveball.id
    assert _ids(choice[1:]) == _ids(mistakes[:2])
    assert open_ended == []


def test_open_list_holds_one_item(make_entry):
    entries = [make_entry(f"c{i}", "Reframe-Hard", OPEN, minutes=i) for i in range(4)]

    _, open_ended = select_daily(entries)

    assert len(open_ended) == 1
    assert open_ended[0].id == entries[0].id


def test_key_never_selected_twice_across_lists(make_entry):
    choice_item = make_entry("c1", "Apply-Medium", MCQ, minutes=0)
    open_item = make_entry("c1", "Apply-Medium", OPEN, minutes=1)

    choice, open_ended = select_daily([choice_item, open_item])

    assert _ids(choice) == [choice_item.id]
    assert open_ended == []


def test_no_duplicate_selection_keys(make_entry):
    entries = [
        make_entry("c1", "Apply-Medium", MCQ, minutes=0),
        make_entry("c1", "Apply-Medium", MSQ, minutes=1),
        make_entry("c1", "Recall-Easy", MCQ, minutes=2),
        make_entry("c2", "Apply-Medium", MCQ, minutes=3),
    ]

    choice, _ = select_daily(entries, mcq_cap=10)

    keys = [(e.concept_id, e.concept_key) for e in choice]
    assert len(keys) == len(set(keys)) == 3


def test_selection_is_deterministic(make_entry):
    entries = [
        make_entry(f"c{i % 3}", f"Key{i % 4}-Easy", MCQ if i % 2 else OPEN,
                   Origin.SPACED_FOLLOW_UP if i == 4 else Origin.MISTAKE, minutes=i % 3)
        for i in range(12)
    ]

    first = select_daily(entries)
    second = select_daily(entries)

    assert [_ids(part) for part in first] == [_ids(part) for part in second]


def test_completed_entries_ignored(make_entry):
    done = make_entry("c1", "Recall-Easy", MCQ, minutes=0, completed=True)
    live = make_entry("c2", "Recall-Easy", MCQ, minutes=1)

    choice, _ = select_daily([done, live])

    assert _ids(choice) == [live.id]


def test_zero_caps_select_nothing(make_entry):
    entries = [
        make_entry("c1", "HowWield-Hard", OPEN, Origin.CURVEBALL),
        make_entry("c2", "Recall-Easy", MCQ),
    ]

    assert select_daily(entries, mcq_cap=0, open_cap=0) == ([], [])
    assert select_daily([], mcq_cap=3, open_cap=1) == ([], [])


def test_pick_without_room_competes_normally(make_entry):
    curveball = make_entry("c1", "HowWield-Hard", OPEN, Origin.CURVEBALL, minutes=0)
    spaced = make_entry("c2", "Apply-Medium", OPEN, Origin.SPACED_FOLLOW_UP, minutes=1)
    mistake = make_entry("c3", "Recall-Easy", MCQ, minutes=2)

    choice, open_ended = select_daily([curveball, spaced, mistake], mcq_cap=3, open_cap=0)

    assert _ids(choice) == [mistake.id]
    assert open_ended == []


def test_entries_for_book_matches_legacy_title(make_entry):
    current = make_entry("c1", book_id="book-1")
    legacy = make_entry("c2", book_id=None, book_title="Deep Work")
    other = make_entry("c3", book_id="book-2", book_title="Deep Work")

    assert _ids(entries_for_book([current, legacy, other], "book-1")) == [current.id]
    assert _ids(entries_for_book([current, legacy, other], "book-1", "Deep Work")) == [
        current.id, legacy.id
    ]


def test_count_pending_splits_by_shape(make_entry):
    entries = [
        make_entry("c1", shape=MCQ),
        make_entry("c2", shape=MSQ),
        make_entry("c3", shape=OPEN),
        make_entry("c4", shape=MCQ, completed=True),
        make_entry("c5", shape=MCQ, book_id="book-2"),
    ]

    assert count_pending(entries, "book-1") == (2, 1)
