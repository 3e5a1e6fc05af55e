"""Storage interface consumed by the service layer."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from inkbook.domain.models import (
    Availability,
    BookingDraft,
    BookingRequest,
    BookingStatus,
    Inquiry,
    TimeSlot,
)


class StudioRepository(Protocol):
    """Availability store, booking ledger and inquiry inbox.

    Implementations must keep ``(date, time_slot)`` unique, make a single
    upsert atomic, and run ``replace_availability_for_date`` and
    ``update_booking_status`` as one all-or-nothing write each.
    """

    def initialize_database(self) -> None: ...

    def list_availability(self) -> list[Availability]: ...

    def list_availability_for_date(self, date: str) -> list[Availability]: ...

    def upsert_availability(
        self,
        date: str,
        time_slot: TimeSlot,
        is_available: bool,
    ) -> Availability: ...

    def replace_availability_for_date(
        self,
        date: str,
        selected_slots: Sequence[TimeSlot],
    ) -> list[Availability]: ...

    def list_booking_requests(self) -> list[BookingRequest]: ...

    def get_booking_request(self, booking_id: int) -> Optional[BookingRequest]: ...

    def create_booking_request(
        self,
        draft: BookingDraft,
        created_at: datetime,
    ) -> BookingRequest: ...

    def update_booking_status(
        self,
        booking_id: int,
        requested_status: BookingStatus,
    ) -> BookingRequest: ...

    def list_inquiries(self) -> list[Inquiry]: ...

    def create_inquiry(
        self,
        name: str,
        email: str,
        message: str,
        created_at: datetime,
    ) -> Inquiry: ...
