"""
Weekly schedule validation.

Pure functions: nothing here touches the database. A proposed schedule is a
list of slots with a weekday label and ``HH:MM:SS`` start/end strings. The
checks run in two passes: every slot on its own (day, format, ordering,
minimum duration), then pairwise overlap within each day.
"""
from collections import OrderedDict
from datetime import datetime, time, timedelta
from enum import Enum
from typing import List, NamedTuple, Sequence

from ..core.exceptions import (
    InvalidDay, InvalidTimeFormat, StartNotBeforeEnd,
    DurationTooShort, OverlappingSlots
)

TIME_FORMAT = "%H:%M:%S"
MIN_SLOT_DURATION = timedelta(minutes=30)


class Weekday(str, Enum):
    SENIN = "Senin"
    SELASA = "Selasa"
    RABU = "Rabu"
    KAMIS = "Kamis"
    JUMAT = "Jumat"
    SABTU = "Sabtu"
    MINGGU = "Minggu"


# Canonical order, Monday first
WEEKDAYS = tuple(day.value for day in Weekday)
WEEKDAY_ORDER = {day: index for index, day in enumerate(WEEKDAYS)}


class ParsedSlot(NamedTuple):
    day: str
    start: str
    end: str
    start_time: time
    end_time: time


def is_valid_day(day: str) -> bool:
    return day in WEEKDAY_ORDER


def parse_time(value: str, field: str = "start", slot_index: int = None) -> time:
    """Parse a strict ``HH:MM:SS`` wall-clock time."""
    # strptime accepts single-digit fields, so the length check keeps
    # the format zero-padded
    if not isinstance(value, str) or len(value) != 8:
        raise InvalidTimeFormat(field, value, slot_index)
    try:
        return datetime.strptime(value, TIME_FORMAT).time()
    except ValueError:
        raise InvalidTimeFormat(field, value, slot_index)


def _duration(start: time, end: time) -> timedelta:
    anchor = datetime.min
    return datetime.combine(anchor, end) - datetime.combine(anchor, start)


def validate_slot(day: str, start: str, end: str, slot_index: int = None) -> ParsedSlot:
    """Validate a single slot and return it with parsed times.

    Raises InvalidDay, InvalidTimeFormat, StartNotBeforeEnd or
    DurationTooShort.
    """
    if not is_valid_day(day):
        raise InvalidDay(day, slot_index)

    start_time = parse_time(start, "start", slot_index)
    end_time = parse_time(end, "end", slot_index)

    if not start_time < end_time:
        raise StartNotBeforeEnd(start, end, slot_index)

    if _duration(start_time, end_time) < MIN_SLOT_DURATION:
        raise DurationTooShort(int(MIN_SLOT_DURATION.total_seconds() // 60), slot_index)

    return ParsedSlot(day, start, end, start_time, end_time)


def is_overlapping(first: ParsedSlot, second: ParsedSlot) -> bool:
    """Half-open interval overlap: touching slots do not overlap."""
    return first.start_time < second.end_time and second.start_time < first.end_time


def _check_no_overlap(day: str, slots: List[ParsedSlot]) -> None:
    for i in range(len(slots)):
        for j in range(i + 1, len(slots)):
            if is_overlapping(slots[i], slots[j]):
                raise OverlappingSlots(day, slots[i], slots[j])


def validate_schedule(slots: Sequence) -> List[ParsedSlot]:
    """Validate a full proposed weekly schedule.

    ``slots`` is any sequence of objects with ``day``, ``start_time`` and
    ``end_time`` string attributes (the request payload items). The returned
    list keeps the input order; nothing is deduplicated or normalized. An
    empty sequence is valid here: whether it may be persisted is decided by
    the caller.
    """
    parsed = [
        validate_slot(slot.day, slot.start_time, slot.end_time, slot_index=index)
        for index, slot in enumerate(slots)
    ]

    by_day = OrderedDict()
    for slot in parsed:
        by_day.setdefault(slot.day, []).append(slot)

    for day, day_slots in by_day.items():
        _check_no_overlap(day, day_slots)

    return parsed
