"""
Domain models for participant selections and best-window results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Iterable, Mapping, Sequence, Tuple

import pendulum

from .time_slot import DEFAULT_INTERVAL_MINUTES, TimeSlot

# Start/end index of a window that covers a whole day.
ALL_DAY_SLOT_INDEX = -1


class SelectionType(str, Enum):
    """How a meeting collects availability."""

    # Dates with specific time-of-day slots, e.g. {"2024-02-15": [9, 10, 11]}
    TIME = "TIME"
    # Whole dates only, e.g. {"2024-02-15": []}
    ALL_DAY = "ALL_DAY"


@dataclass(frozen=True)
class ParticipantSelection:
    """
    One participant's availability for a meeting.

    An empty slot sequence for a date means "available that day, no specific
    time".
    """
    user_id: Hashable
    selections: Mapping[str, Sequence[int]]
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES

    @classmethod
    def from_times(
        cls,
        user_id: Hashable,
        times_by_date: Mapping[str, Iterable[str]],
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    ) -> "ParticipantSelection":
        """
        Build a selection from "HH:mm" strings instead of slot indices.

        Raises:
            TimeSlotError: If any time cannot be converted
        """
        selections: Dict[str, Tuple[int, ...]] = {}
        for date, times in times_by_date.items():
            indices = {
                TimeSlot.from_time_string(time_str, interval_minutes).slot_index
                for time_str in times
            }
            selections[date] = tuple(sorted(indices))
        return cls(user_id=user_id, selections=selections, interval_minutes=interval_minutes)

    def dates(self) -> Tuple[str, ...]:
        """Dates this participant marked, sorted."""
        return tuple(sorted(self.selections))


@dataclass(frozen=True)
class MeetingSelections:
    """Everything a selection source knows about one meeting's votes."""
    meeting_id: str
    selection_type: SelectionType
    interval_minutes: int
    selections: Tuple[ParticipantSelection, ...]
    user_directory: Mapping[Hashable, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BestWindow:
    """
    A contiguous run of slots on one date and who can attend all of it.

    ``start_slot_index == end_slot_index`` for a single slot; both are
    ``ALL_DAY_SLOT_INDEX`` for a whole-day window.
    """
    date: str
    start_slot_index: int
    end_slot_index: int
    count: int
    percentage: str
    participants: Tuple[Any, ...] = field(default_factory=tuple)

    def is_range(self) -> bool:
        """True if the window spans more than one slot."""
        return self.start_slot_index != self.end_slot_index

    def is_all_day(self) -> bool:
        return self.start_slot_index == ALL_DAY_SLOT_INDEX and self.end_slot_index == ALL_DAY_SLOT_INDEX

    def width(self) -> int:
        """Number of slots beyond the first one."""
        return self.end_slot_index - self.start_slot_index

    def overlaps(self, other: "BestWindow") -> bool:
        """Check if two windows on the same date share at least one slot."""
        if self.date != other.date:
            return False
        return (
            self.start_slot_index <= other.end_slot_index
            and other.start_slot_index <= self.end_slot_index
        )

    def format_time_range(self, interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> str:
        """
        Format the window's time span.

        - whole day: "ALL_DAY"
        - single slot: "09:00"
        - range: "09:00 ~ 12:00", the end being where the last slot finishes
        """
        if self.is_all_day():
            return SelectionType.ALL_DAY.value

        start = TimeSlot.from_index(self.start_slot_index, interval_minutes).to_time_string()
        if not self.is_range():
            return start

        end_index = self.end_slot_index + 1
        end_slot = TimeSlot.from_index(self.end_slot_index, interval_minutes)
        if end_index == end_slot.slots_per_day:
            end = "24:00"
        else:
            end = TimeSlot.from_index(end_index, interval_minutes).to_time_string()
        return f"{start} ~ {end}"

    def format_display(self, interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> str:
        """
        Format the window for display.
        Format: Weekday, YYYY-MM-DD | HH:mm ~ HH:mm (count, percentage)
        """
        day = pendulum.from_format(self.date, "YYYY-MM-DD")
        time_str = self.format_time_range(interval_minutes)
        return f"{day.format('dddd, YYYY-MM-DD')} | {time_str} ({self.count}, {self.percentage})"


@dataclass(frozen=True)
class SummaryResult:
    """Ranked shortlist of best windows for a meeting."""
    total_participants: int
    best_windows: Tuple[BestWindow, ...] = field(default_factory=tuple)

    def top(self) -> BestWindow | None:
        """The highest ranked window, if any."""
        return self.best_windows[0] if self.best_windows else None


@dataclass(frozen=True)
class ScheduleGrid:
    """
    Who is available in each slot of each date.

    Whole-day availability is keyed by ``ALL_DAY_SLOT_INDEX``.
    """
    slots: Mapping[str, Mapping[int, Tuple[Any, ...]]]

    def dates(self) -> Tuple[str, ...]:
        return tuple(self.slots)

    def participants_at(self, date: str, slot_index: int) -> Tuple[Any, ...]:
        """Participants available in a slot, empty if nobody marked it."""
        return tuple(self.slots.get(date, {}).get(slot_index, ()))
