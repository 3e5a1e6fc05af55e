"""Error taxonomy shared by the repository and service layers."""

from __future__ import annotations

from typing import Iterable


class StudioError(Exception):
    """Base exception for availability and booking workflow failures."""


class InputValidationError(StudioError):
    """Raised when caller input is missing or malformed.

    ``fields`` names every offending input so the boundary can report all of
    them at once.
    """

    def __init__(self, message: str, fields: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.fields = list(fields)


class BookingNotFoundError(StudioError):
    """Raised when a status update targets an unknown booking id."""


class StatusTransitionError(StudioError):
    """Raised when a booking status change is not allowed by the lifecycle."""


class StorageError(StudioError):
    """Raised when the backing store is unreachable or rejects a write."""
