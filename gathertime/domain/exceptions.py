"""
Domain-specific exception hierarchy for the gathertime application.
"""


class GatherTimeError(Exception):
    """Base class for all application-level errors."""


class TimeSlotError(GatherTimeError, ValueError):
    """Raised when a slot index, interval or time string is not usable."""


class InvalidTimeFormatError(TimeSlotError):
    """Raised when a time string is not of the form ``HH:mm``."""


class InvalidHourError(TimeSlotError):
    """Raised when the hour component is outside 0..23."""


class InvalidMinuteError(TimeSlotError):
    """Raised when the minute component is outside 0..59."""


class MisalignedTimeError(TimeSlotError):
    """Raised when a time does not start a slot of the configured interval."""


class SlotIndexOutOfRangeError(TimeSlotError):
    """Raised when a slot index falls outside the day for its interval."""


class InvalidIntervalError(TimeSlotError):
    """Raised when the interval is not positive or does not divide a day."""


class SelectionError(GatherTimeError, ValueError):
    """Raised when participant selections cannot be aggregated."""


class MixedIntervalError(SelectionError):
    """Raised when selections in one aggregation use different intervals."""


class MeetingFileError(SelectionError):
    """Raised when a meeting file cannot be read or parsed."""
