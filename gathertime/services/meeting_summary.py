"""
Application services for summarizing a meeting's availability votes.

The service coordinates fetching selections via a selection source adapter
and delegates the actual ranking to the domain-level
``BestWindowCalculator``. This keeps the CLI thin and improves testability by
allowing the storage dependency to be mocked via a simple protocol.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Hashable, List, Protocol, Sequence, Set

from ..domain.availability_index import build_schedule_grid
from ..domain.best_window_calculator import BestWindowCalculator
from ..domain.models import MeetingSelections, ParticipantSelection, ScheduleGrid, SummaryResult

logger = logging.getLogger(__name__)


class SelectionSourceProtocol(Protocol):
    """Protocol describing the selection store behaviour needed by the service."""

    async def get_selections(self, meeting_id: str) -> MeetingSelections:
        """Return the meeting's settings and every participant's selection."""


class MeetingSummaryService:
    """
    Orchestrates selection retrieval and best-window calculation.

    Dependency inversion toward a protocol makes it easy to plug in the file
    store or a stub implementation in tests.
    """

    def __init__(
        self,
        selection_source: SelectionSourceProtocol,
        calculator: BestWindowCalculator,
    ) -> None:
        self._selection_source = selection_source
        self._calculator = calculator

    async def summarize(self, meeting_id: str) -> SummaryResult:
        """
        Retrieve selections, normalize them, and rank the best windows.
        """
        meeting = await self.fetch_selections(meeting_id)
        return self.calculate_summary(meeting)

    async def schedule(self, meeting_id: str) -> ScheduleGrid:
        """Retrieve selections and build the per-slot attendance grid."""
        meeting = await self.fetch_selections(meeting_id)
        return build_schedule_grid(meeting.selections, meeting.user_directory)

    async def fetch_selections(self, meeting_id: str) -> MeetingSelections:
        """Fetch a meeting's selections, one entry per participant."""
        meeting = await self._selection_source.get_selections(meeting_id)

        return replace(
            meeting,
            selections=tuple(self._merge_duplicate_participants(meeting.selections)),
        )

    def calculate_summary(self, meeting: MeetingSelections) -> SummaryResult:
        """Rank the best windows from already fetched selections."""
        return self._calculator.build_summary(
            meeting.selection_type,
            meeting.interval_minutes,
            meeting.selections,
            self.count_participants(meeting.selections),
            user_directory=meeting.user_directory,
        )

    @staticmethod
    def count_participants(selections: Sequence[ParticipantSelection]) -> int:
        """Number of distinct users who voted, whatever they picked."""
        return len({selection.user_id for selection in selections})

    @staticmethod
    def _merge_duplicate_participants(
        selections: Sequence[ParticipantSelection],
    ) -> List[ParticipantSelection]:
        """
        Collapse repeated entries for the same user into one selection.

        Stores should hold one row per user and meeting; if one hands back
        more, the union of the user's slots is used so they are counted once.
        """
        merged: Dict[Hashable, Dict[str, Set[int]]] = {}
        first_seen: Dict[Hashable, ParticipantSelection] = {}

        for selection in selections:
            if selection.user_id not in merged:
                first_seen[selection.user_id] = selection
                merged[selection.user_id] = {
                    date: set(slots) for date, slots in selection.selections.items()
                }
                continue

            logger.warning(
                "Merging duplicate selection entry for user %s", selection.user_id
            )
            dates = merged[selection.user_id]
            for date, slots in selection.selections.items():
                dates.setdefault(date, set()).update(slots)

        result: List[ParticipantSelection] = []
        for user_id, dates in merged.items():
            original = first_seen[user_id]
            if original.selections.keys() == dates.keys() and all(
                set(original.selections[date]) == slots for date, slots in dates.items()
            ):
                result.append(original)
                continue
            result.append(
                ParticipantSelection(
                    user_id=user_id,
                    selections={date: tuple(sorted(slots)) for date, slots in dates.items()},
                    interval_minutes=original.interval_minutes,
                )
            )

        return result
