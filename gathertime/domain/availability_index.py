"""
Builds per-date participant indexes from raw participant selections.

Every structure returned here iterates in sorted date order and, within a
date, sorted slot order, so nothing downstream depends on the order the
selections arrived in.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, FrozenSet, Hashable, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .exceptions import MixedIntervalError
from .models import ALL_DAY_SLOT_INDEX, ParticipantSelection, ScheduleGrid

logger = logging.getLogger(__name__)

# date -> slot index -> ids of users available in that slot
DateSlotIndex = Dict[str, Dict[int, FrozenSet[Hashable]]]

# date -> ids of users who listed that date
DateIndex = Dict[str, FrozenSet[Hashable]]


def ensure_common_interval(selections: Sequence[ParticipantSelection]) -> Optional[int]:
    """
    Check that all selections were made on the same slot interval.

    Returns:
        The shared interval, or None when there are no selections

    Raises:
        MixedIntervalError: If two selections disagree
    """
    intervals = {selection.interval_minutes for selection in selections}
    if len(intervals) > 1:
        raise MixedIntervalError(
            f"Selections use different slot intervals: {sorted(intervals)}"
        )
    return intervals.pop() if intervals else None


def build_availability_index(selections: Sequence[ParticipantSelection]) -> DateSlotIndex:
    """
    Map every (date, slot) to the users who marked it.

    Slot indices are taken as given; checking them against the meeting's
    offered slots is the caller's job.

    Args:
        selections: Participant selections sharing one interval

    Returns:
        Sorted two-level index of user id sets
    """
    ensure_common_interval(selections)

    collected: Dict[str, Dict[int, Set[Hashable]]] = defaultdict(lambda: defaultdict(set))

    for selection in selections:
        for date, slots in selection.selections.items():
            date_slots = collected[date]
            for slot in slots:
                date_slots[slot].add(selection.user_id)

    index: DateSlotIndex = {}
    for date in sorted(collected):
        date_slots = collected[date]
        index[date] = {slot: frozenset(date_slots[slot]) for slot in sorted(date_slots)}

    logger.debug(
        "Indexed %d selections into %d dates",
        len(selections),
        len(index),
    )
    return index


def build_date_index(selections: Sequence[ParticipantSelection]) -> DateIndex:
    """
    Map every date to the users who listed it, ignoring slot indices.
    """
    collected: Dict[str, Set[Hashable]] = defaultdict(set)

    for selection in selections:
        for date in selection.selections:
            collected[date].add(selection.user_id)

    return {date: frozenset(collected[date]) for date in sorted(collected)}


def build_schedule_grid(
    selections: Sequence[ParticipantSelection],
    user_directory: Optional[Mapping[Hashable, Any]] = None
) -> ScheduleGrid:
    """
    Build the per-slot attendance grid shown next to the best windows.

    A date listed with no slots is recorded under ``ALL_DAY_SLOT_INDEX``.
    """
    collected: Dict[str, Dict[int, Set[Hashable]]] = defaultdict(lambda: defaultdict(set))

    for selection in selections:
        for date, slots in selection.selections.items():
            date_slots = collected[date]
            if not slots:
                date_slots[ALL_DAY_SLOT_INDEX].add(selection.user_id)
                continue
            for slot in slots:
                date_slots[slot].add(selection.user_id)

    grid: Dict[str, Dict[int, Tuple[Any, ...]]] = {}
    for date in sorted(collected):
        date_slots = collected[date]
        grid[date] = {
            slot: resolve_participants(date_slots[slot], user_directory)
            for slot in sorted(date_slots)
        }

    return ScheduleGrid(slots=grid)


def sorted_user_ids(user_ids: Iterable[Hashable]) -> List[Hashable]:
    """Sort user ids, tolerating a mix of int and str ids."""
    return sorted(user_ids, key=lambda user_id: (type(user_id).__name__, user_id))


def resolve_participants(
    user_ids: Iterable[Hashable],
    user_directory: Optional[Mapping[Hashable, Any]] = None
) -> Tuple[Any, ...]:
    """
    Turn user ids into user references, ordered by id.

    Ids missing from the directory are kept as the raw id.
    """
    ordered = sorted_user_ids(user_ids)
    if user_directory is None:
        return tuple(ordered)
    return tuple(user_directory.get(user_id, user_id) for user_id in ordered)
