"""
Interval-indexed time-of-day value type.

A day is split into fixed-width buckets of ``interval_minutes``; a slot is the
zero-based index of one bucket. With the default 60 minute interval there are
24 slots (0 -> 00:00, 23 -> 23:00); with 30 minutes there are 48
(1 -> 00:30, 47 -> 23:30); with 15 minutes 96.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import (
    InvalidHourError,
    InvalidIntervalError,
    InvalidMinuteError,
    InvalidTimeFormatError,
    MisalignedTimeError,
    SlotIndexOutOfRangeError,
)

MINUTES_PER_DAY = 24 * 60
DEFAULT_INTERVAL_MINUTES = 60


def validate_interval(interval_minutes: int) -> int:
    """
    Ensure an interval is positive and splits a day into whole slots.

    Returns:
        The interval, unchanged

    Raises:
        InvalidIntervalError: If the interval is not usable
    """
    if interval_minutes <= 0:
        raise InvalidIntervalError(
            f"Interval must be a positive number of minutes, got {interval_minutes}"
        )
    if MINUTES_PER_DAY % interval_minutes != 0:
        raise InvalidIntervalError(
            f"Interval must evenly divide {MINUTES_PER_DAY} minutes, got {interval_minutes}"
        )
    return interval_minutes


@dataclass(frozen=True)
class TimeSlot:
    """
    Immutable slot of the day under a given interval.

    Invariant: 0 <= slot_index < slots_per_day.
    """
    slot_index: int
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES

    def __post_init__(self):
        validate_interval(self.interval_minutes)
        max_index = self.slots_per_day - 1
        if not 0 <= self.slot_index <= max_index:
            raise SlotIndexOutOfRangeError(
                f"Slot index {self.slot_index} is outside 0..{max_index} "
                f"for a {self.interval_minutes} minute interval"
            )

    @classmethod
    def from_index(
        cls,
        slot_index: int,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    ) -> "TimeSlot":
        """Create a slot from its index."""
        return cls(slot_index=slot_index, interval_minutes=interval_minutes)

    @classmethod
    def from_time_string(
        cls,
        time_str: str,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    ) -> "TimeSlot":
        """
        Create a slot from an ``HH:mm`` string.

        The time must fall exactly on a slot boundary; "09:15" is rejected for
        a 60 minute interval rather than rounded.

        Args:
            time_str: Time such as "09:00" or "09:30"
            interval_minutes: Slot width in minutes

        Returns:
            TimeSlot starting at that time

        Raises:
            InvalidTimeFormatError: If the string is not two numeric fields
            InvalidHourError: If the hour is outside 0..23
            InvalidMinuteError: If the minute is outside 0..59
            MisalignedTimeError: If the time is not on a slot boundary
            InvalidIntervalError: If the interval is not usable
        """
        validate_interval(interval_minutes)

        parts = time_str.split(":")
        if len(parts) != 2 or not all(_is_number(part) for part in parts):
            raise InvalidTimeFormatError(f"Expected time as HH:mm, got '{time_str}'")

        hour, minute = int(parts[0]), int(parts[1])

        if not 0 <= hour <= 23:
            raise InvalidHourError(f"Hour must be between 0 and 23, got {hour}")
        if not 0 <= minute <= 59:
            raise InvalidMinuteError(f"Minute must be between 0 and 59, got {minute}")

        total_minutes = hour * 60 + minute
        if total_minutes % interval_minutes != 0:
            raise MisalignedTimeError(
                f"Time '{time_str}' is not aligned to a {interval_minutes} minute interval"
            )

        return cls(slot_index=total_minutes // interval_minutes, interval_minutes=interval_minutes)

    @property
    def slots_per_day(self) -> int:
        return MINUTES_PER_DAY // self.interval_minutes

    @property
    def hour(self) -> int:
        return (self.slot_index * self.interval_minutes) // 60

    @property
    def minute(self) -> int:
        return (self.slot_index * self.interval_minutes) % 60

    def to_time_string(self) -> str:
        """Format as "HH:mm"."""
        return f"{self.hour:02d}:{self.minute:02d}"

    def is_next_slot(self, other: "TimeSlot") -> bool:
        """Check if ``other`` directly follows this slot."""
        return self.slot_index + 1 == other.slot_index

    def is_before(self, other: "TimeSlot") -> bool:
        return self.slot_index < other.slot_index

    def is_after(self, other: "TimeSlot") -> bool:
        return self.slot_index > other.slot_index

    def __str__(self) -> str:
        return self.to_time_string()


def _is_number(part: str) -> bool:
    return part.isascii() and part.isdigit()
