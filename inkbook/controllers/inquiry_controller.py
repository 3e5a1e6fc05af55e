"""HTTP controller layer for contact inquiries."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from inkbook.controllers.dependencies import get_inquiry_service, require_admin
from inkbook.controllers.errors import validation_http_error
from inkbook.controllers.schemas import CamelModel
from inkbook.domain.errors import InputValidationError, StorageError
from inkbook.domain.models import Inquiry
from inkbook.services.inquiry_service import InquiryService
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["inquiries"])


class CreateInquiryRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class InquiryResponse(CamelModel):
    id: int = Field(gt=0)
    name: str
    email: str
    message: str
    created_at: datetime


def _to_response(inquiry: Inquiry) -> InquiryResponse:
    return InquiryResponse(
        id=inquiry.inquiry_id,
        name=inquiry.name,
        email=inquiry.email,
        message=inquiry.message,
        created_at=inquiry.created_at,
    )


@router.get(
    "/inquiries",
    response_model=list[InquiryResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def list_inquiries(
    service: InquiryService = Depends(get_inquiry_service),
) -> list[InquiryResponse]:
    try:
        return [_to_response(inquiry) for inquiry in service.list_inquiries()]
    except StorageError as exc:
        logger.error("Inquiry storage failure: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Inquiry storage is unavailable",
        ) from exc


@router.post(
    "/inquiries",
    response_model=InquiryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_inquiry(
    payload: CreateInquiryRequest,
    service: InquiryService = Depends(get_inquiry_service),
) -> InquiryResponse:
    try:
        inquiry = service.create_inquiry(
            name=payload.name,
            email=payload.email,
            message=payload.message,
        )
        return _to_response(inquiry)
    except InputValidationError as exc:
        raise validation_http_error(exc) from exc
    except StorageError as exc:
        logger.error("Inquiry storage failure: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Inquiry storage is unavailable",
        ) from exc
