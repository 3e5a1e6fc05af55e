"""In-process repository used by tests and ``STORAGE_BACKEND=memory``."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from threading import RLock
from typing import Optional, Sequence

from inkbook.domain.booking_lifecycle import transition_status
from inkbook.domain.errors import BookingNotFoundError
from inkbook.domain.models import (
    Availability,
    BookingDraft,
    BookingRequest,
    BookingStatus,
    Inquiry,
    TimeSlot,
)
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)


def _availability_sort_key(record: Availability) -> tuple[str, int]:
    return record.date, record.time_slot.order


class InMemoryRepository:
    """Dictionary-backed store; every operation runs under one re-entrant lock."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._availability: dict[tuple[str, TimeSlot], Availability] = {}
        self._bookings: dict[int, BookingRequest] = {}
        self._inquiries: dict[int, Inquiry] = {}
        self._next_availability_id = 1
        self._next_booking_id = 1
        self._next_inquiry_id = 1

    def initialize_database(self) -> None:
        logger.info("Using in-memory repository; nothing is persisted")

    def list_availability(self) -> list[Availability]:
        with self._lock:
            return sorted(self._availability.values(), key=_availability_sort_key)

    def list_availability_for_date(self, date: str) -> list[Availability]:
        with self._lock:
            return sorted(
                (record for record in self._availability.values() if record.date == date),
                key=_availability_sort_key,
            )

    def _write_slot(self, date: str, time_slot: TimeSlot, is_available: bool) -> Availability:
        key = (date, time_slot)
        existing = self._availability.get(key)
        if existing is not None:
            record = replace(existing, is_available=is_available)
        else:
            record = Availability(
                availability_id=self._next_availability_id,
                date=date,
                time_slot=time_slot,
                is_available=is_available,
            )
            self._next_availability_id += 1
        self._availability[key] = record
        return record

    def upsert_availability(
        self,
        date: str,
        time_slot: TimeSlot,
        is_available: bool,
    ) -> Availability:
        with self._lock:
            return self._write_slot(date, time_slot, is_available)

    def replace_availability_for_date(
        self,
        date: str,
        selected_slots: Sequence[TimeSlot],
    ) -> list[Availability]:
        with self._lock:
            snapshot = dict(self._availability)
            next_id = self._next_availability_id
            try:
                currently_available = {
                    record.time_slot
                    for record in self._availability.values()
                    if record.date == date and record.is_available
                }
                selected = list(selected_slots)
                for slot in sorted(currently_available - set(selected), key=lambda s: s.order):
                    self._write_slot(date, slot, False)
                for slot in selected:
                    self._write_slot(date, slot, True)
            except Exception:
                self._availability = snapshot
                self._next_availability_id = next_id
                raise
            return self.list_availability_for_date(date)

    def list_booking_requests(self) -> list[BookingRequest]:
        with self._lock:
            return [self._bookings[key] for key in sorted(self._bookings)]

    def get_booking_request(self, booking_id: int) -> Optional[BookingRequest]:
        with self._lock:
            return self._bookings.get(booking_id)

    def create_booking_request(
        self,
        draft: BookingDraft,
        created_at: datetime,
    ) -> BookingRequest:
        with self._lock:
            booking = BookingRequest(
                booking_id=self._next_booking_id,
                name=draft.name,
                email=draft.email,
                body_part=draft.body_part,
                size=draft.size,
                description=draft.description,
                requested_date=draft.requested_date,
                status=BookingStatus.PENDING,
                created_at=created_at,
            )
            self._bookings[booking.booking_id] = booking
            self._next_booking_id += 1
            return booking

    def update_booking_status(
        self,
        booking_id: int,
        requested_status: BookingStatus,
    ) -> BookingRequest:
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None:
                raise BookingNotFoundError(f"Booking request {booking_id} not found")
            updated = replace(
                current,
                status=transition_status(current.status, requested_status),
            )
            self._bookings[booking_id] = updated
            return updated

    def list_inquiries(self) -> list[Inquiry]:
        with self._lock:
            return [self._inquiries[key] for key in sorted(self._inquiries)]

    def create_inquiry(
        self,
        name: str,
        email: str,
        message: str,
        created_at: datetime,
    ) -> Inquiry:
        with self._lock:
            inquiry = Inquiry(
                inquiry_id=self._next_inquiry_id,
                name=name,
                email=email,
                message=message,
                created_at=created_at,
            )
            self._inquiries[inquiry.inquiry_id] = inquiry
            self._next_inquiry_id += 1
            return inquiry
