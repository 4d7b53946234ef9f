"""
Domain exceptions.

Validation errors are client errors and carry enough context (slot index,
day, times) to build a user-facing message. Storage errors are server errors;
their message is safe to return and the underlying cause is kept on
``cause`` for logging.
"""
from typing import Optional


class ScheduleValidationError(Exception):
    """A proposed schedule was rejected before anything was persisted."""

    def __init__(self, message: str, slot_index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.slot_index = slot_index


class InvalidDay(ScheduleValidationError):
    def __init__(self, day: str, slot_index: Optional[int] = None):
        super().__init__(f"Invalid day: {day}", slot_index)
        self.day = day


class InvalidTimeFormat(ScheduleValidationError):
    def __init__(self, field: str, value: str, slot_index: Optional[int] = None):
        super().__init__(f"Invalid {field} time format: {value!r} (expected HH:MM:SS)", slot_index)
        self.field = field
        self.value = value


class StartNotBeforeEnd(ScheduleValidationError):
    def __init__(self, start: str, end: str, slot_index: Optional[int] = None):
        super().__init__("Start time must be before end time", slot_index)
        self.start = start
        self.end = end


class DurationTooShort(ScheduleValidationError):
    def __init__(self, minutes: int, slot_index: Optional[int] = None):
        super().__init__(f"Minimum consultation duration is {minutes} minutes", slot_index)
        self.minutes = minutes


class OverlappingSlots(ScheduleValidationError):
    def __init__(self, day: str, first, second):
        super().__init__(
            f"Overlapping slots for {day}: "
            f"{first.start}-{first.end} and {second.start}-{second.end}"
        )
        self.day = day
        self.first = first
        self.second = second


class EmptySchedule(ScheduleValidationError):
    def __init__(self):
        super().__init__("At least one slot is required; use DELETE to clear the schedule")


class ScheduleConflictError(Exception):
    """The schedule changed since the version the caller last read."""

    def __init__(self, owner_id: int, expected_version: int):
        super().__init__(
            f"Schedule for psychologist {owner_id} is no longer at version {expected_version}"
        )
        self.owner_id = owner_id
        self.expected_version = expected_version


class StorageError(Exception):
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class DuplicateKeyError(StorageError):
    def __init__(self, key: str, cause: Optional[BaseException] = None):
        super().__init__(f"Duplicate value for {key}", cause)
        self.key = key
