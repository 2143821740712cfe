"""
Tests for the TimeSlot value type.
"""

import pytest

from gathertime.domain.exceptions import (
    InvalidHourError,
    InvalidIntervalError,
    InvalidMinuteError,
    InvalidTimeFormatError,
    MisalignedTimeError,
    SlotIndexOutOfRangeError,
    TimeSlotError,
)
from gathertime.domain.time_slot import TimeSlot


class TestFromIndex:
    """Tests for building slots from an index."""

    def test_default_interval_is_hourly(self):
        """Test that the default interval gives one slot per hour."""
        slot = TimeSlot.from_index(9)

        assert slot.interval_minutes == 60
        assert slot.slots_per_day == 24
        assert slot.to_time_string() == "09:00"

    @pytest.mark.parametrize(
        "index, interval, expected",
        [
            (0, 60, "00:00"),
            (23, 60, "23:00"),
            (1, 30, "00:30"),
            (47, 30, "23:30"),
            (95, 15, "23:45"),
            (37, 15, "09:15"),
        ],
    )
    def test_to_time_string(self, index, interval, expected):
        """Test formatting for several intervals."""
        assert TimeSlot.from_index(index, interval).to_time_string() == expected

    def test_hour_and_minute(self):
        """Test derived hour and minute."""
        slot = TimeSlot.from_index(19, 30)

        assert slot.hour == 9
        assert slot.minute == 30
        assert str(slot) == "09:30"

    @pytest.mark.parametrize("index, interval", [(-1, 60), (24, 60), (48, 30), (96, 15)])
    def test_index_out_of_range(self, index, interval):
        """Test that indices outside the day are rejected."""
        with pytest.raises(SlotIndexOutOfRangeError):
            TimeSlot.from_index(index, interval)

    @pytest.mark.parametrize("interval", [0, -30, 7, 50])
    def test_invalid_interval(self, interval):
        """Test that unusable intervals are rejected."""
        with pytest.raises(InvalidIntervalError):
            TimeSlot.from_index(0, interval)

    def test_errors_are_value_errors(self):
        """Test that slot errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            TimeSlot.from_index(99)


class TestFromTimeString:
    """Tests for parsing HH:mm strings."""

    def test_aligned_time(self):
        """Test parsing a time on a slot boundary."""
        assert TimeSlot.from_time_string("09:00", 60).slot_index == 9
        assert TimeSlot.from_time_string("09:30", 30).slot_index == 19

    def test_misaligned_time_is_rejected(self):
        """Test that 09:15 is not rounded onto an hourly grid."""
        with pytest.raises(MisalignedTimeError):
            TimeSlot.from_time_string("09:15", 60)

    @pytest.mark.parametrize("value", ["0900", "09:00:00", "", "ab:cd", "9:", " 9:00", "-1:00"])
    def test_invalid_format(self, value):
        """Test that malformed strings are rejected."""
        with pytest.raises(InvalidTimeFormatError):
            TimeSlot.from_time_string(value)

    def test_invalid_hour(self):
        """Test that hours above 23 are rejected."""
        with pytest.raises(InvalidHourError):
            TimeSlot.from_time_string("24:00")

    def test_invalid_minute(self):
        """Test that minutes above 59 are rejected."""
        with pytest.raises(InvalidMinuteError):
            TimeSlot.from_time_string("10:60")

    def test_invalid_interval(self):
        """Test that the interval is validated before parsing."""
        with pytest.raises(InvalidIntervalError):
            TimeSlot.from_time_string("10:00", 0)

    def test_error_kinds_share_a_base(self):
        """Test that every parsing failure is a TimeSlotError."""
        for value in ["bad", "25:00", "10:61", "10:10"]:
            with pytest.raises(TimeSlotError):
                TimeSlot.from_time_string(value, 60)

    @pytest.mark.parametrize("interval", [15, 30, 60, 90, 120])
    def test_round_trip(self, interval):
        """Test that every index survives formatting and parsing."""
        slots_per_day = 1440 // interval
        for index in range(slots_per_day):
            time_str = TimeSlot.from_index(index, interval).to_time_string()
            assert TimeSlot.from_time_string(time_str, interval).slot_index == index


class TestComparison:
    """Tests for slot ordering and equality."""

    def test_equality(self):
        """Test that equality needs both index and interval to match."""
        assert TimeSlot.from_index(2, 30) == TimeSlot.from_time_string("01:00", 30)
        assert TimeSlot.from_index(2, 30) != TimeSlot.from_index(2, 60)

    def test_ordering_helpers(self):
        """Test before/after/next checks."""
        nine = TimeSlot.from_index(9)
        ten = TimeSlot.from_index(10)
        eleven = TimeSlot.from_index(11)

        assert nine.is_before(ten)
        assert ten.is_after(nine)
        assert nine.is_next_slot(ten)
        assert not nine.is_next_slot(eleven)
        assert not ten.is_next_slot(nine)

    def test_immutable(self):
        """Test that slots cannot be changed after creation."""
        slot = TimeSlot.from_index(9)

        with pytest.raises(AttributeError):
            slot.slot_index = 10
