"""Availability coordination: per-slot writes and whole-date replacement."""

from __future__ import annotations

from datetime import date as calendar_date
from typing import Iterable, Optional

from inkbook.domain.calendar import normalize_calendar_date, parse_time_slot, parse_time_slots
from inkbook.domain.models import Availability, TimeSlot
from inkbook.repository.base import StudioRepository
from inkbook.repository.factory import build_repository
from inkbook.utils.config import Settings, get_settings
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)


class AvailabilityService:
    """Validates slot/date input before it reaches the availability store.

    The admin gesture "these slots, on this date" maps to
    ``replace_availability_for_date``, which the repository applies as a
    single transaction: deselected slots are cleared first, then every
    selected slot is marked available.
    """

    def __init__(
        self,
        repository: Optional[StudioRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or build_repository(self._settings)

    def get_availability(self) -> list[Availability]:
        return self._repository.list_availability()

    def get_available_slots(self, date: calendar_date | str) -> list[TimeSlot]:
        """Slots a visitor may pick on ``date``, morning first."""
        target_date = normalize_calendar_date(date)
        return [
            record.time_slot
            for record in self._repository.list_availability_for_date(target_date)
            if record.is_available
        ]

    def set_availability(
        self,
        date: calendar_date | str,
        time_slot: str | TimeSlot,
        is_available: bool,
    ) -> Availability:
        slot = parse_time_slot(time_slot)
        target_date = normalize_calendar_date(date)
        record = self._repository.upsert_availability(target_date, slot, bool(is_available))
        logger.info(
            "Availability set date=%s slot=%s available=%s",
            target_date,
            slot.value,
            record.is_available,
        )
        return record

    def replace_availability_for_date(
        self,
        date: calendar_date | str,
        selected_slots: Iterable[str | TimeSlot],
    ) -> list[Availability]:
        slots = parse_time_slots(selected_slots)
        target_date = normalize_calendar_date(date)
        records = self._repository.replace_availability_for_date(target_date, slots)
        logger.info(
            "Availability replaced date=%s slots=%s",
            target_date,
            ",".join(slot.value for slot in slots) or "-",
        )
        return records
