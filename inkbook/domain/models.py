"""Domain models for studio availability, booking requests and inquiries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TimeSlot(str, Enum):
    """Bookable parts of a studio day, declared in calendar order."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def order(self) -> int:
        return list(TimeSlot).index(self)


class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(status.value for status in cls)


@dataclass(frozen=True)
class Availability:
    availability_id: int
    date: str
    time_slot: TimeSlot
    is_available: bool


@dataclass(frozen=True)
class BookingRequest:
    booking_id: int
    name: str
    email: str
    body_part: str
    size: str
    description: str
    requested_date: str
    status: BookingStatus
    created_at: datetime


@dataclass(frozen=True)
class BookingDraft:
    """Validated visitor input, before the ledger assigns id/status/timestamp."""

    name: str
    email: str
    body_part: str
    size: str
    description: str
    requested_date: str


@dataclass(frozen=True)
class Inquiry:
    inquiry_id: int
    name: str
    email: str
    message: str
    created_at: datetime
