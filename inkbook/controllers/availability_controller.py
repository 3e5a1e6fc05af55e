"""HTTP controller layer for the availability calendar."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from inkbook.controllers.dependencies import get_availability_service, require_admin
from inkbook.controllers.errors import validation_http_error
from inkbook.controllers.schemas import CamelModel
from inkbook.domain.calendar import normalize_calendar_date
from inkbook.domain.errors import InputValidationError, StorageError
from inkbook.domain.models import Availability
from inkbook.services.availability_service import AvailabilityService
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["availability"])


class SetAvailabilityRequest(CamelModel):
    """Slot and date stay plain strings so the service owns their error messages."""

    date: str
    time_slot: str
    is_available: bool = True


class ReplaceAvailabilityRequest(CamelModel):
    time_slots: list[str] = Field(default_factory=list)


class AvailabilityResponse(CamelModel):
    id: int = Field(gt=0)
    date: str
    time_slot: str
    is_available: bool


class AvailableSlotsResponse(CamelModel):
    date: str
    time_slots: list[str]


def _to_response(record: Availability) -> AvailabilityResponse:
    return AvailabilityResponse(
        id=record.availability_id,
        date=record.date,
        time_slot=record.time_slot.value,
        is_available=record.is_available,
    )


def _storage_failure(exc: StorageError) -> HTTPException:
    logger.error("Availability storage failure: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Availability storage is unavailable",
    )


@router.get(
    "/availability",
    response_model=list[AvailabilityResponse],
    status_code=status.HTTP_200_OK,
)
async def list_availability(
    service: AvailabilityService = Depends(get_availability_service),
) -> list[AvailabilityResponse]:
    try:
        return [_to_response(record) for record in service.get_availability()]
    except StorageError as exc:
        raise _storage_failure(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected availability read failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load availability",
        ) from exc


@router.get(
    "/availability/{date}/slots",
    response_model=AvailableSlotsResponse,
    status_code=status.HTTP_200_OK,
)
async def list_available_slots(
    date: str,
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailableSlotsResponse:
    """Slots a visitor can choose on one date, in time-of-day order."""
    try:
        target_date = normalize_calendar_date(date)
        slots = service.get_available_slots(target_date)
    except InputValidationError as exc:
        raise validation_http_error(exc) from exc
    except StorageError as exc:
        raise _storage_failure(exc) from exc
    return AvailableSlotsResponse(
        date=target_date,
        time_slots=[slot.value for slot in slots],
    )


@router.post(
    "/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def set_availability(
    payload: SetAvailabilityRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    """Create or update the flag for one (date, slot) pair."""
    try:
        record = service.set_availability(
            date=payload.date,
            time_slot=payload.time_slot,
            is_available=payload.is_available,
        )
        return _to_response(record)
    except InputValidationError as exc:
        raise validation_http_error(exc) from exc
    except StorageError as exc:
        raise _storage_failure(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected availability write failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update availability",
        ) from exc


@router.put(
    "/availability/{date}",
    response_model=list[AvailabilityResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def replace_availability_for_date(
    date: str,
    payload: ReplaceAvailabilityRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> list[AvailabilityResponse]:
    """Make exactly ``timeSlots`` available on ``date`` in one transaction."""
    try:
        records = service.replace_availability_for_date(date, payload.time_slots)
        return [_to_response(record) for record in records]
    except InputValidationError as exc:
        raise validation_http_error(exc) from exc
    except StorageError as exc:
        raise _storage_failure(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected availability replace failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to replace availability",
        ) from exc
