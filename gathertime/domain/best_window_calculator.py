"""
Core business logic for ranking the best meeting windows.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Hashable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .availability_index import (
    build_availability_index,
    build_date_index,
    ensure_common_interval,
    resolve_participants,
)
from .exceptions import MixedIntervalError, SelectionError
from .models import ALL_DAY_SLOT_INDEX, BestWindow, ParticipantSelection, SelectionType, SummaryResult
from .time_slot import TimeSlot, validate_interval

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 3


@dataclass(frozen=True)
class _Candidate:
    """A window under consideration, before user ids are resolved."""
    date: str
    start: int
    end: int
    user_ids: FrozenSet[Hashable]

    @property
    def count(self) -> int:
        return len(self.user_ids)

    def overlaps(self, other: "_Candidate") -> bool:
        return self.start <= other.end and other.start <= self.end


def format_percentage(count: int, total_participants: int) -> str:
    """
    Share of participants as a whole percentage, e.g. "67%".

    Halves round up. A meeting nobody voted on reports "0%".
    """
    if total_participants <= 0:
        return "0%"
    # Integer form of floor(count * 100 / total + 0.5)
    rounded = (count * 200 + total_participants) // (2 * total_participants)
    return f"{rounded}%"


class BestWindowCalculator:
    """
    Finds the windows with the broadest attendance overlap.

    Algorithm (time-of-day meetings):
    1. Index who is available in every (date, slot)
    2. For each date, enumerate every contiguous run of populated slots,
       keeping the set of users present in all of its slots
    3. Rank by attendance, then width, then date, then start slot
    4. Greedily keep the best windows that do not overlap one already kept
       on the same date, up to ``top_n``

    Whole-day meetings skip steps 2 and 4: each date is one window.
    """

    def __init__(self, top_n: int = DEFAULT_TOP_N):
        if top_n < 1:
            raise ValueError(f"top_n must be at least 1, got {top_n}")
        self.top_n = top_n

    def build_summary(
        self,
        selection_type: SelectionType,
        interval_minutes: int,
        selections: Sequence[ParticipantSelection],
        total_participants: int,
        *,
        user_directory: Optional[Mapping[Hashable, Any]] = None
    ) -> SummaryResult:
        """Summarize a meeting according to how it collects availability."""
        if SelectionType(selection_type) is SelectionType.ALL_DAY:
            return self.compute_all_day_summary(
                selections,
                total_participants,
                user_directory=user_directory,
            )

        return self.compute_time_summary(
            interval_minutes,
            selections,
            total_participants,
            user_directory=user_directory,
        )

    def compute_time_summary(
        self,
        interval_minutes: int,
        selections: Sequence[ParticipantSelection],
        total_participants: int,
        *,
        user_directory: Optional[Mapping[Hashable, Any]] = None
    ) -> SummaryResult:
        """
        Rank contiguous time windows across all dates.

        Args:
            interval_minutes: Slot width shared by every selection
            selections: Participant selections, already checked against the
                meeting's offered slots
            total_participants: Number of distinct users who voted
            user_directory: Optional id -> user reference lookup

        Returns:
            SummaryResult with up to ``top_n`` non-overlapping windows

        Raises:
            InvalidIntervalError: If the interval is not usable
            MixedIntervalError: If a selection uses another interval
            SlotIndexOutOfRangeError: If a slot index does not fit the day
        """
        validate_interval(interval_minutes)
        _validate_total(total_participants)

        shared_interval = ensure_common_interval(selections)
        if shared_interval is not None and shared_interval != interval_minutes:
            raise MixedIntervalError(
                f"Selections use a {shared_interval} minute interval, "
                f"expected {interval_minutes}"
            )
        _validate_slot_indices(selections, interval_minutes)

        index = build_availability_index(selections)

        candidates: List[_Candidate] = []
        for date, slot_users in index.items():
            candidates.extend(self._enumerate_ranges(date, slot_users))

        ranked = sorted(candidates, key=_rank_key)
        chosen = self._select_non_overlapping(ranked)

        logger.debug(
            "Ranked %d candidate windows over %d dates, kept %d",
            len(candidates),
            len(index),
            len(chosen),
        )

        return self._assemble(total_participants, chosen, user_directory)

    def compute_all_day_summary(
        self,
        selections: Sequence[ParticipantSelection],
        total_participants: int,
        *,
        user_directory: Optional[Mapping[Hashable, Any]] = None
    ) -> SummaryResult:
        """
        Rank whole dates by how many participants listed them.

        Slot indices are ignored; every window is ``ALL_DAY_SLOT_INDEX``.
        """
        _validate_total(total_participants)

        candidates = [
            _Candidate(date=date, start=ALL_DAY_SLOT_INDEX, end=ALL_DAY_SLOT_INDEX, user_ids=user_ids)
            for date, user_ids in build_date_index(selections).items()
        ]
        ranked = sorted(candidates, key=lambda c: (-c.count, c.date))

        return self._assemble(total_participants, ranked[:self.top_n], user_directory)

    def _enumerate_ranges(
        self,
        date: str,
        slot_users: Dict[int, FrozenSet[Hashable]]
    ) -> Iterator[_Candidate]:
        """
        Yield every contiguous window of populated slots on one date.

        Each start slot is widened one adjacent slot at a time, intersecting
        its user set as it goes. Widening stops at a gap or once nobody is
        left, since the intersection can only shrink.

        Example: slots [14, 15, 16] -> (14,14) (14,15) (14,16) (15,15) (15,16) (16,16)
                 slots [14, 16]     -> (14,14) (16,16)
        """
        sorted_slots = sorted(slot_users)

        for i, start in enumerate(sorted_slots):
            common = slot_users[start]
            if not common:
                continue

            end = start
            yield _Candidate(date=date, start=start, end=end, user_ids=common)

            for next_slot in sorted_slots[i + 1:]:
                if next_slot != end + 1:
                    break

                common = common & slot_users[next_slot]
                if not common:
                    break

                end = next_slot
                yield _Candidate(date=date, start=start, end=end, user_ids=common)

    def _select_non_overlapping(self, ranked: Sequence[_Candidate]) -> List[_Candidate]:
        """
        Take the best ranked windows, skipping any that overlap a window
        already taken on the same date.
        """
        chosen: List[_Candidate] = []
        chosen_by_date: Dict[str, List[_Candidate]] = {}

        for candidate in ranked:
            if len(chosen) >= self.top_n:
                break

            taken = chosen_by_date.setdefault(candidate.date, [])
            if any(candidate.overlaps(existing) for existing in taken):
                continue

            chosen.append(candidate)
            taken.append(candidate)

        return chosen

    @staticmethod
    def _assemble(
        total_participants: int,
        chosen: Sequence[_Candidate],
        user_directory: Optional[Mapping[Hashable, Any]]
    ) -> SummaryResult:
        """Convert chosen candidates into the result handed to callers."""
        windows: Tuple[BestWindow, ...] = tuple(
            BestWindow(
                date=candidate.date,
                start_slot_index=candidate.start,
                end_slot_index=candidate.end,
                count=candidate.count,
                percentage=format_percentage(candidate.count, total_participants),
                participants=resolve_participants(candidate.user_ids, user_directory),
            )
            for candidate in chosen
        )
        return SummaryResult(total_participants=total_participants, best_windows=windows)


def _rank_key(candidate: _Candidate) -> Tuple[int, int, str, int]:
    # count desc, width desc, date asc, start asc
    return (-candidate.count, -(candidate.end - candidate.start), candidate.date, candidate.start)


def _validate_slot_indices(selections: Sequence[ParticipantSelection], interval_minutes: int) -> None:
    # Raises SlotIndexOutOfRangeError; -1 is the whole-day marker, never a time slot
    for selection in selections:
        for slots in selection.selections.values():
            for slot in slots:
                TimeSlot.from_index(slot, interval_minutes)


def _validate_total(total_participants: int) -> None:
    if total_participants < 0:
        raise SelectionError(
            f"total_participants must not be negative, got {total_participants}"
        )


_default_calculator = BestWindowCalculator()


def compute_time_summary(
    interval_minutes: int,
    selections: Sequence[ParticipantSelection],
    total_participants: int,
    *,
    user_directory: Optional[Mapping[Hashable, Any]] = None
) -> SummaryResult:
    """Rank time windows with the default top-3 calculator."""
    return _default_calculator.compute_time_summary(
        interval_minutes,
        selections,
        total_participants,
        user_directory=user_directory,
    )


def compute_all_day_summary(
    selections: Sequence[ParticipantSelection],
    total_participants: int,
    *,
    user_directory: Optional[Mapping[Hashable, Any]] = None
) -> SummaryResult:
    """Rank whole dates with the default top-3 calculator."""
    return _default_calculator.compute_all_day_summary(
        selections,
        total_participants,
        user_directory=user_directory,
    )


def build_summary(
    selection_type: SelectionType,
    interval_minutes: int,
    selections: Sequence[ParticipantSelection],
    total_participants: int,
    *,
    user_directory: Optional[Mapping[Hashable, Any]] = None
) -> SummaryResult:
    """Summarize with the default top-3 calculator."""
    return _default_calculator.build_summary(
        selection_type,
        interval_minutes,
        selections,
        total_participants,
        user_directory=user_directory,
    )
