"""Calendar-day and time-slot normalization applied at the service boundary.

All dates are studio-local calendar days stored as ``YYYY-MM-DD``. Inputs
carrying a time of day keep the calendar date as written; the time and any
UTC offset are dropped without converting between zones, so
``2025-06-01T23:30:00-05:00`` is the studio day ``2025-06-01``.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable

from inkbook.domain.errors import InputValidationError
from inkbook.domain.models import TimeSlot


INVALID_DATE_MESSAGE = "Invalid date format"
INVALID_TIME_SLOT_MESSAGE = "Invalid time slot"

_CALENDAR_DAY = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def normalize_calendar_date(value: date | datetime | str, field_name: str = "date") -> str:
    """Return ``value`` as a ``YYYY-MM-DD`` studio calendar day.

    Strings must start with an extended ``YYYY-MM-DD`` date; ISO basic
    (``20250601``) and week (``2025-W22-7``) forms are rejected.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not _CALENDAR_DAY.match(value.strip()):
        raise InputValidationError(INVALID_DATE_MESSAGE, fields=[field_name])

    raw = value.strip()
    day, time_part = raw[:10], raw[10:]
    try:
        if not time_part:
            return date.fromisoformat(day).isoformat()
        if time_part[0] not in "Tt ":
            raise ValueError(raw)
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        return datetime.fromisoformat(raw).date().isoformat()
    except ValueError:
        raise InputValidationError(INVALID_DATE_MESSAGE, fields=[field_name]) from None


def parse_time_slot(value: str | TimeSlot, field_name: str = "timeSlot") -> TimeSlot:
    if isinstance(value, TimeSlot):
        return value
    try:
        return TimeSlot(value)
    except ValueError:
        raise InputValidationError(INVALID_TIME_SLOT_MESSAGE, fields=[field_name]) from None


def parse_time_slots(values: Iterable[str | TimeSlot]) -> tuple[TimeSlot, ...]:
    """Validate a slot selection, dropping duplicates and sorting by time of day."""
    selected = {parse_time_slot(value, field_name="timeSlots") for value in values}
    return tuple(sorted(selected, key=lambda slot: slot.order))
