"""Booking request intake and admin review."""

from __future__ import annotations

from datetime import date as calendar_date
from datetime import datetime, timezone
from typing import Callable, Optional

from inkbook.domain.booking_lifecycle import parse_status
from inkbook.domain.calendar import normalize_calendar_date
from inkbook.domain.constraints import clean_text_fields, is_valid_email
from inkbook.domain.errors import InputValidationError
from inkbook.domain.models import BookingDraft, BookingRequest, BookingStatus
from inkbook.repository.base import StudioRepository
from inkbook.repository.factory import build_repository
from inkbook.utils.config import Settings, get_settings
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingService:
    """Creates pending booking requests and applies admin status decisions.

    Submissions are not checked against the availability calendar; the
    studio reviews every request by hand.
    """

    def __init__(
        self,
        repository: Optional[StudioRepository] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or build_repository(self._settings)
        self._clock = clock

    def list_booking_requests(self) -> list[BookingRequest]:
        return self._repository.list_booking_requests()

    def _build_draft(
        self,
        *,
        name: object,
        email: object,
        body_part: object,
        size: object,
        description: object,
        requested_date: object,
    ) -> BookingDraft:
        cleaned, invalid = clean_text_fields(
            {
                "name": name,
                "email": email,
                "bodyPart": body_part,
                "size": size,
                "description": description,
            }
        )
        if "email" not in invalid and not is_valid_email(cleaned["email"]):
            invalid.append("email")

        normalized_date = ""
        if isinstance(requested_date, (str, calendar_date)):
            try:
                normalized_date = normalize_calendar_date(
                    requested_date,
                    field_name="requestedDate",
                )
            except InputValidationError:
                invalid.append("requestedDate")
        else:
            invalid.append("requestedDate")

        if invalid:
            raise InputValidationError(
                f"Invalid booking request fields: {', '.join(invalid)}",
                fields=invalid,
            )
        return BookingDraft(
            name=cleaned["name"],
            email=cleaned["email"],
            body_part=cleaned["bodyPart"],
            size=cleaned["size"],
            description=cleaned["description"],
            requested_date=normalized_date,
        )

    def create_booking_request(
        self,
        *,
        name: object,
        email: object,
        body_part: object,
        size: object,
        description: object,
        requested_date: object,
    ) -> BookingRequest:
        """Validate visitor input and record it as a pending request."""
        draft = self._build_draft(
            name=name,
            email=email,
            body_part=body_part,
            size=size,
            description=description,
            requested_date=requested_date,
        )
        booking = self._repository.create_booking_request(draft, created_at=self._clock())
        logger.info(
            "Booking request %s created for %s",
            booking.booking_id,
            booking.requested_date,
        )
        return booking

    def update_booking_status(
        self,
        booking_id: int,
        status: str | BookingStatus,
    ) -> BookingRequest:
        requested = parse_status(status)
        booking = self._repository.update_booking_status(booking_id, requested)
        logger.info("Booking request %s is now %s", booking_id, booking.status.value)
        return booking
