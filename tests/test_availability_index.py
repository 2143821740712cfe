"""
Tests for availability index builders.
"""

import pytest

from gathertime.domain.availability_index import (
    build_availability_index,
    build_date_index,
    build_schedule_grid,
    ensure_common_interval,
    resolve_participants,
)
from gathertime.domain.exceptions import MixedIntervalError
from gathertime.domain.models import ALL_DAY_SLOT_INDEX, ParticipantSelection


class TestBuildAvailabilityIndex:
    """Tests for the date -> slot -> users index."""

    def test_groups_users_by_date_and_slot(self):
        """Test that each slot lists everyone who marked it."""
        selections = [
            ParticipantSelection(user_id=1, selections={"2024-02-15": [18, 19, 21], "2024-02-16": [22]}),
            ParticipantSelection(user_id=2, selections={"2024-02-15": [19]}),
        ]

        index = build_availability_index(selections)

        assert index == {
            "2024-02-15": {18: frozenset({1}), 19: frozenset({1, 2}), 21: frozenset({1})},
            "2024-02-16": {22: frozenset({1})},
        }

    def test_iterates_in_sorted_order(self):
        """Test that dates and slots come out sorted whatever the input order."""
        selections = [
            ParticipantSelection(user_id=1, selections={"2024-02-17": [12, 3], "2024-02-15": [7]}),
            ParticipantSelection(user_id=2, selections={"2024-02-16": [5]}),
        ]

        index = build_availability_index(selections)

        assert list(index) == ["2024-02-15", "2024-02-16", "2024-02-17"]
        assert list(index["2024-02-17"]) == [3, 12]

    def test_empty_slot_list_adds_no_slots(self):
        """Test that a whole-day entry has no slots in the time index."""
        selections = [ParticipantSelection(user_id=1, selections={"2024-02-15": []})]

        assert build_availability_index(selections) == {"2024-02-15": {}}

    def test_mixed_intervals_rejected(self):
        """Test that selections must share an interval."""
        selections = [
            ParticipantSelection(user_id=1, selections={}, interval_minutes=60),
            ParticipantSelection(user_id=2, selections={}, interval_minutes=15),
        ]

        with pytest.raises(MixedIntervalError):
            build_availability_index(selections)


class TestEnsureCommonInterval:
    """Tests for the shared interval check."""

    def test_no_selections(self):
        """Test that an empty list has no interval."""
        assert ensure_common_interval([]) is None

    def test_shared_interval(self):
        """Test that the shared interval is returned."""
        selections = [
            ParticipantSelection(user_id=1, selections={}, interval_minutes=30),
            ParticipantSelection(user_id=2, selections={}, interval_minutes=30),
        ]

        assert ensure_common_interval(selections) == 30


class TestBuildDateIndex:
    """Tests for the whole-day index."""

    def test_collects_users_per_date(self):
        """Test that slot indices are ignored."""
        selections = [
            ParticipantSelection(user_id=1, selections={"2024-02-16": [], "2024-02-15": [9]}),
            ParticipantSelection(user_id=2, selections={"2024-02-15": []}),
        ]

        index = build_date_index(selections)

        assert index == {"2024-02-15": frozenset({1, 2}), "2024-02-16": frozenset({1})}
        assert list(index) == ["2024-02-15", "2024-02-16"]


class TestBuildScheduleGrid:
    """Tests for the per-slot attendance grid."""

    def test_time_slots_and_all_day(self):
        """Test that empty slot lists land under the ALL_DAY key."""
        selections = [
            ParticipantSelection(user_id=2, selections={"2024-02-15": [10, 9]}),
            ParticipantSelection(user_id=1, selections={"2024-02-15": [9], "2024-02-16": []}),
        ]

        grid = build_schedule_grid(selections, user_directory={1: "Kim", 2: "Lee"})

        assert grid.dates() == ("2024-02-15", "2024-02-16")
        assert list(grid.slots["2024-02-15"]) == [9, 10]
        assert grid.participants_at("2024-02-15", 9) == ("Kim", "Lee")
        assert grid.participants_at("2024-02-15", 10) == ("Lee",)
        assert grid.participants_at("2024-02-16", ALL_DAY_SLOT_INDEX) == ("Kim",)
        assert grid.participants_at("2024-02-15", 11) == ()
        assert grid.participants_at("2024-03-01", 9) == ()


class TestResolveParticipants:
    """Tests for id -> reference resolution."""

    def test_sorted_by_id(self):
        """Test that references follow id order."""
        assert resolve_participants({3, 1, 2}) == (1, 2, 3)

    def test_mixed_id_types(self):
        """Test that int and str ids can be sorted together."""
        assert resolve_participants({"b", 2, "a", 1}) == (1, 2, "a", "b")

    def test_unknown_ids_fall_back(self):
        """Test that ids missing from the directory stay as ids."""
        assert resolve_participants({1, 2}, {2: "Lee"}) == (1, "Lee")
