"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability_index import build_availability_index, build_date_index, build_schedule_grid
from .best_window_calculator import (
    BestWindowCalculator,
    build_summary,
    compute_all_day_summary,
    compute_time_summary,
    format_percentage,
)
from .models import (
    ALL_DAY_SLOT_INDEX,
    BestWindow,
    MeetingSelections,
    ParticipantSelection,
    ScheduleGrid,
    SelectionType,
    SummaryResult,
)
from .time_slot import TimeSlot

__all__ = [
    "ALL_DAY_SLOT_INDEX",
    "BestWindow",
    "BestWindowCalculator",
    "MeetingSelections",
    "ParticipantSelection",
    "ScheduleGrid",
    "SelectionType",
    "SummaryResult",
    "TimeSlot",
    "build_availability_index",
    "build_date_index",
    "build_schedule_grid",
    "build_summary",
    "compute_all_day_summary",
    "compute_time_summary",
    "format_percentage",
]
