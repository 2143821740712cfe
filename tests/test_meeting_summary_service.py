"""
Tests for the MeetingSummaryService orchestration layer.
"""

import asyncio
from typing import List, Sequence

from gathertime.domain.best_window_calculator import BestWindowCalculator
from gathertime.domain.models import MeetingSelections, ParticipantSelection, SelectionType
from gathertime.services.meeting_summary import MeetingSummaryService


class StubSelectionSource:
    """Minimal stub matching SelectionSourceProtocol."""

    def __init__(
        self,
        selections: Sequence[ParticipantSelection],
        selection_type: SelectionType = SelectionType.TIME,
        user_directory=None,
    ):
        self._selections = tuple(selections)
        self._selection_type = selection_type
        self._user_directory = user_directory or {}
        self.calls: List[str] = []

    async def get_selections(self, meeting_id):
        self.calls.append(meeting_id)
        return MeetingSelections(
            meeting_id=meeting_id,
            selection_type=self._selection_type,
            interval_minutes=60,
            selections=self._selections,
            user_directory=self._user_directory,
        )


def _build_service(source: StubSelectionSource, top_n: int = 3) -> MeetingSummaryService:
    return MeetingSummaryService(selection_source=source, calculator=BestWindowCalculator(top_n=top_n))


def test_summarize_uses_source_and_calculator():
    """End-to-end call should yield ranked windows."""
    source = StubSelectionSource(
        [
            ParticipantSelection(user_id=1, selections={"2024-02-15": [14, 15, 16]}),
            ParticipantSelection(user_id=2, selections={"2024-02-15": [14, 15]}),
        ],
        user_directory={1: "Kim", 2: "Lee"},
    )
    service = _build_service(source)

    result = asyncio.run(service.summarize("kickoff"))

    assert source.calls == ["kickoff"]
    assert result.total_participants == 2
    top = result.top()
    assert (top.start_slot_index, top.end_slot_index, top.count) == (14, 15, 2)
    assert top.participants == ("Kim", "Lee")
    assert top.percentage == "100%"


def test_total_counts_distinct_voters():
    """Participants who picked nothing still count toward the total."""
    source = StubSelectionSource(
        [
            ParticipantSelection(user_id=1, selections={"2024-02-15": [9]}),
            ParticipantSelection(user_id=2, selections={}),
        ]
    )

    result = asyncio.run(_build_service(source).summarize("m"))

    assert result.total_participants == 2
    assert result.top().percentage == "50%"


def test_all_day_meeting_uses_all_day_path():
    """ALL_DAY meetings rank whole dates."""
    source = StubSelectionSource(
        [
            ParticipantSelection(user_id=1, selections={"2024-03-05": []}),
            ParticipantSelection(user_id=2, selections={"2024-03-05": [], "2024-03-06": []}),
        ],
        selection_type=SelectionType.ALL_DAY,
    )

    result = asyncio.run(_build_service(source).summarize("offsite"))

    assert [(w.date, w.start_slot_index, w.count) for w in result.best_windows] == [
        ("2024-03-05", -1, 2),
        ("2024-03-06", -1, 1),
    ]


def test_duplicate_participant_entries_are_merged():
    """A user returned twice by the source is counted once."""
    source = StubSelectionSource(
        [
            ParticipantSelection(user_id=1, selections={"2024-02-15": [9]}),
            ParticipantSelection(user_id=1, selections={"2024-02-15": [10], "2024-02-16": [9]}),
            ParticipantSelection(user_id=2, selections={"2024-02-15": [9, 10]}),
        ]
    )
    service = _build_service(source)

    meeting = asyncio.run(service.fetch_selections("m"))

    assert [s.user_id for s in meeting.selections] == [1, 2]
    assert meeting.selections[0].selections == {"2024-02-15": (9, 10), "2024-02-16": (9,)}
    assert service.calculate_summary(meeting).total_participants == 2


def test_unique_participants_are_passed_through():
    """Selections without duplicates are left untouched."""
    original = ParticipantSelection(user_id=1, selections={"2024-02-15": [9]})
    source = StubSelectionSource([original])

    meeting = asyncio.run(_build_service(source).fetch_selections("m"))

    assert meeting.selections == (original,)


def test_schedule_builds_grid():
    """The schedule view lists participants per slot."""
    source = StubSelectionSource(
        [
            ParticipantSelection(user_id=1, selections={"2024-02-15": [9, 10]}),
            ParticipantSelection(user_id=2, selections={"2024-02-15": [10]}),
        ],
        user_directory={1: "Kim", 2: "Lee"},
    )

    grid = asyncio.run(_build_service(source).schedule("m"))

    assert grid.participants_at("2024-02-15", 9) == ("Kim",)
    assert grid.participants_at("2024-02-15", 10) == ("Kim", "Lee")


def test_count_participants():
    """Distinct user ids are counted."""
    selections = [
        ParticipantSelection(user_id="a", selections={}),
        ParticipantSelection(user_id="b", selections={}),
        ParticipantSelection(user_id="a", selections={}),
    ]

    assert MeetingSummaryService.count_participants(selections) == 2
