"""Contact inquiry intake."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from inkbook.domain.constraints import clean_text_fields, is_valid_email
from inkbook.domain.errors import InputValidationError
from inkbook.domain.models import Inquiry
from inkbook.repository.base import StudioRepository
from inkbook.repository.factory import build_repository
from inkbook.utils.config import Settings, get_settings
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)


class InquiryService:
    def __init__(
        self,
        repository: Optional[StudioRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or build_repository(self._settings)

    def list_inquiries(self) -> list[Inquiry]:
        return self._repository.list_inquiries()

    def create_inquiry(self, *, name: object, email: object, message: object) -> Inquiry:
        cleaned, invalid = clean_text_fields({"name": name, "email": email, "message": message})
        if "email" not in invalid and not is_valid_email(cleaned["email"]):
            invalid.append("email")
        if invalid:
            raise InputValidationError(
                f"Invalid inquiry fields: {', '.join(invalid)}",
                fields=invalid,
            )
        inquiry = self._repository.create_inquiry(
            name=cleaned["name"],
            email=cleaned["email"],
            message=cleaned["message"],
            created_at=datetime.now(timezone.utc),
        )
        logger.info("Inquiry %s received", inquiry.inquiry_id)
        return inquiry
