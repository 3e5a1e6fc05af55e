"""Booking request status lifecycle: pending -> approved | rejected."""

from __future__ import annotations

from inkbook.domain.errors import InputValidationError, StatusTransitionError
from inkbook.domain.models import BookingStatus


ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED}),
    BookingStatus.APPROVED: frozenset(),
    BookingStatus.REJECTED: frozenset(),
}


def parse_status(value: str | BookingStatus) -> BookingStatus:
    """Coerce raw input into a ``BookingStatus``; anything else is invalid."""
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(str(value).strip().lower())
    except ValueError:
        raise InputValidationError(
            f"Invalid status {value!r}; expected one of {', '.join(BookingStatus.values())}",
            fields=["status"],
        ) from None


def transition_status(current: BookingStatus, requested: BookingStatus) -> BookingStatus:
    """Return the status a booking ends up in after requesting ``requested``.

    Requesting the current status is a no-op. Terminal states have no
    outgoing transitions.
    """
    if requested == current:
        return current
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise StatusTransitionError(
            f"Cannot change booking status from {current.value} to {requested.value}"
        )
    return requested
