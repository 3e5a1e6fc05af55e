"""HTTP controller layer for booking request intake and review."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from inkbook.controllers.dependencies import get_booking_service, require_admin
from inkbook.controllers.errors import validation_http_error
from inkbook.controllers.schemas import CamelModel
from inkbook.domain.errors import (
    BookingNotFoundError,
    InputValidationError,
    StatusTransitionError,
    StorageError,
)
from inkbook.domain.models import BookingRequest
from inkbook.services.booking_service import BookingService
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["booking-requests"])


class CreateBookingRequest(CamelModel):
    """Visitor form payload.

    Fields are optional here so that the service reports every missing one
    in a single response. ``status`` and ``createdAt`` are not accepted.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    body_part: Optional[str] = None
    size: Optional[str] = None
    description: Optional[str] = None
    requested_date: Optional[str] = None


class UpdateBookingStatusRequest(CamelModel):
    status: str = Field(min_length=1)


class BookingRequestResponse(CamelModel):
    id: int = Field(gt=0)
    name: str
    email: str
    body_part: str
    size: str
    description: str
    requested_date: str
    status: str
    created_at: datetime


def _to_response(booking: BookingRequest) -> BookingRequestResponse:
    return BookingRequestResponse(
        id=booking.booking_id,
        name=booking.name,
        email=booking.email,
        body_part=booking.body_part,
        size=booking.size,
        description=booking.description,
        requested_date=booking.requested_date,
        status=booking.status.value,
        created_at=booking.created_at,
    )


def _storage_failure(exc: StorageError) -> HTTPException:
    logger.error("Booking storage failure: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Booking storage is unavailable",
    )


@router.get(
    "/booking-requests",
    response_model=list[BookingRequestResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def list_booking_requests(
    service: BookingService = Depends(get_booking_service),
) -> list[BookingRequestResponse]:
    try:
        return [_to_response(booking) for booking in service.list_booking_requests()]
    except StorageError as exc:
        raise _storage_failure(exc) from exc


@router.post(
    "/booking-requests",
    response_model=BookingRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking_request(
    payload: CreateBookingRequest,
    service: BookingService = Depends(get_booking_service),
) -> BookingRequestResponse:
    try:
        booking = service.create_booking_request(
            name=payload.name,
            email=payload.email,
            body_part=payload.body_part,
            size=payload.size,
            description=payload.description,
            requested_date=payload.requested_date,
        )
        return _to_response(booking)
    except InputValidationError as exc:
        raise validation_http_error(exc) from exc
    except StorageError as exc:
        raise _storage_failure(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected booking submission failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit booking request",
        ) from exc


@router.patch(
    "/booking-requests/{booking_id}/status",
    response_model=BookingRequestResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def update_booking_status(
    booking_id: int,
    payload: UpdateBookingStatusRequest,
    service: BookingService = Depends(get_booking_service),
) -> BookingRequestResponse:
    try:
        booking = service.update_booking_status(booking_id, payload.status)
        return _to_response(booking)
    except InputValidationError as exc:
        raise validation_http_error(exc) from exc
    except BookingNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except StatusTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
    except StorageError as exc:
        raise _storage_failure(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected booking status failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update booking status",
        ) from exc
