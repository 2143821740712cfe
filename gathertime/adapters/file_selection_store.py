"""
Selection store backed by YAML or JSON meeting files.

A meeting file looks like::

    meeting_id: kickoff
    selection_type: TIME          # or ALL_DAY
    interval_minutes: 60
    participants:
      - id: 1
        name: Kim
        selections:
          "2024-02-15": ["14:00", "15:00"]
      - id: 2
        name: Lee
        selections:
          "2024-02-15": [14, 15, 16]

Slots may be given as "HH:mm" strings or as slot indices. Unquoted times such
as 14:00 are kept as strings rather than YAML 1.1 base-60 integers. ALL_DAY
meetings may list plain dates instead of a mapping.
"""

import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, Hashable, List, Mapping, Tuple

import pendulum
import yaml

from ..domain.exceptions import MeetingFileError
from ..domain.models import MeetingSelections, ParticipantSelection, SelectionType
from ..domain.time_slot import DEFAULT_INTERVAL_MINUTES, TimeSlot, validate_interval

logger = logging.getLogger(__name__)

MEETING_FILE_SUFFIXES = (".yaml", ".yml", ".json")


class MeetingFileLoader(yaml.SafeLoader):
    """SafeLoader that reads sexagesimal scalars like 14:00 as strings."""


def _construct_int_or_time(loader: MeetingFileLoader, node: yaml.ScalarNode) -> Any:
    value = loader.construct_scalar(node)
    if ":" in value:
        return value
    return loader.construct_yaml_int(node)


MeetingFileLoader.add_constructor("tag:yaml.org,2002:int", _construct_int_or_time)


class FileSelectionStore:
    """
    Loads meeting selections from files in a directory.

    ``get_selections("kickoff")`` reads ``kickoff.yaml``, ``kickoff.yml`` or
    ``kickoff.json`` from the store directory.
    """

    def __init__(self, meetings_dir: Path, default_interval_minutes: int = DEFAULT_INTERVAL_MINUTES):
        """
        Initialize the store.

        Args:
            meetings_dir: Directory holding one file per meeting
            default_interval_minutes: Interval for files that do not set one
        """
        self.meetings_dir = Path(meetings_dir)
        self.default_interval_minutes = validate_interval(default_interval_minutes)

    async def get_selections(self, meeting_id: str) -> MeetingSelections:
        """
        Load a meeting's selections.

        Raises:
            FileNotFoundError: If no file exists for the meeting
            MeetingFileError: If the file cannot be parsed
        """
        return load_meeting_file(
            self.find_meeting_file(meeting_id),
            default_interval_minutes=self.default_interval_minutes,
        )

    def find_meeting_file(self, meeting_id: str) -> Path:
        """Locate the file for a meeting id."""
        for suffix in MEETING_FILE_SUFFIXES:
            candidate = self.meetings_dir / f"{meeting_id}{suffix}"
            if candidate.exists():
                return candidate

        raise FileNotFoundError(
            f"No meeting file for '{meeting_id}' in {self.meetings_dir} "
            f"(looked for {', '.join(MEETING_FILE_SUFFIXES)})"
        )

    def list_meetings(self) -> List[str]:
        """Ids of all meetings in the store, sorted."""
        if not self.meetings_dir.is_dir():
            return []
        return sorted({
            path.stem for path in self.meetings_dir.iterdir()
            if path.suffix in MEETING_FILE_SUFFIXES
        })


def load_meeting_file(
    path: Path,
    default_interval_minutes: int = DEFAULT_INTERVAL_MINUTES
) -> MeetingSelections:
    """
    Read and parse a single meeting file.

    Args:
        path: Path to a .yaml, .yml or .json file
        default_interval_minutes: Interval used when the file does not set one

    Returns:
        MeetingSelections for the file

    Raises:
        FileNotFoundError: If the file doesn't exist
        MeetingFileError: If the content is malformed
        TimeSlotError: If an interval or time is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Meeting file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.load(f, Loader=MeetingFileLoader) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MeetingFileError(f"Invalid meeting file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise MeetingFileError(f"Meeting file {path} must contain a mapping at the root level.")

    logger.debug("Loaded meeting file %s", path)
    return parse_meeting(
        data,
        default_meeting_id=path.stem,
        default_interval_minutes=default_interval_minutes,
    )


def parse_meeting(
    data: Mapping[str, Any],
    default_meeting_id: str = "",
    default_interval_minutes: int = DEFAULT_INTERVAL_MINUTES
) -> MeetingSelections:
    """Build MeetingSelections from an already decoded mapping."""
    meeting_id = str(data.get("meeting_id") or default_meeting_id)

    raw_type = str(data.get("selection_type", SelectionType.TIME.value)).upper()
    try:
        selection_type = SelectionType(raw_type)
    except ValueError as exc:
        raise MeetingFileError(
            f"Unknown selection_type '{raw_type}' for meeting '{meeting_id}'"
        ) from exc

    interval_minutes = data.get("interval_minutes", default_interval_minutes)
    if not isinstance(interval_minutes, int):
        raise MeetingFileError(f"interval_minutes must be an integer, got {interval_minutes!r}")
    validate_interval(interval_minutes)

    raw_participants = data.get("participants") or []
    if not isinstance(raw_participants, list):
        raise MeetingFileError(f"participants must be a list in meeting '{meeting_id}'")

    selections: List[ParticipantSelection] = []
    user_directory: Dict[Hashable, Any] = {}

    for position, raw in enumerate(raw_participants):
        if not isinstance(raw, dict) or "id" not in raw:
            raise MeetingFileError(
                f"Participant #{position + 1} in meeting '{meeting_id}' needs an 'id'"
            )

        user_id = raw["id"]
        user_directory[user_id] = raw.get("name") or user_id
        selections.append(
            ParticipantSelection(
                user_id=user_id,
                selections=_parse_selections(raw.get("selections") or {}, interval_minutes),
                interval_minutes=interval_minutes,
            )
        )

    return MeetingSelections(
        meeting_id=meeting_id,
        selection_type=selection_type,
        interval_minutes=interval_minutes,
        selections=tuple(selections),
        user_directory=user_directory,
    )


def _parse_selections(raw: Any, interval_minutes: int) -> Dict[str, Tuple[int, ...]]:
    """Normalize one participant's selections to date -> sorted slot indices."""
    if isinstance(raw, list):
        # ALL_DAY shorthand: a plain list of dates
        return {_parse_date(date): () for date in raw}

    if not isinstance(raw, dict):
        raise MeetingFileError(f"selections must be a mapping or a list of dates, got {raw!r}")

    parsed: Dict[str, Tuple[int, ...]] = {}
    for date, slots in raw.items():
        indices = {_parse_slot(slot, interval_minutes) for slot in (slots or [])}
        parsed[_parse_date(date)] = tuple(sorted(indices))
    return parsed


def _parse_date(value: Any) -> str:
    """Validate a YYYY-MM-DD date, accepting dates YAML already decoded."""
    if isinstance(value, datetime.date):
        return value.isoformat()[:10]

    try:
        return pendulum.from_format(str(value), "YYYY-MM-DD").to_date_string()
    except ValueError as exc:
        raise MeetingFileError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def _parse_slot(value: Any, interval_minutes: int) -> int:
    if isinstance(value, bool):
        raise MeetingFileError(f"Invalid slot {value!r}")
    if isinstance(value, int):
        return TimeSlot.from_index(value, interval_minutes).slot_index
    if isinstance(value, str):
        return TimeSlot.from_time_string(value, interval_minutes).slot_index
    raise MeetingFileError(f"Slot must be an index or an HH:mm string, got {value!r}")
