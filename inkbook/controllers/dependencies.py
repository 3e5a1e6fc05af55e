"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from inkbook.services.auth_service import AuthService
from inkbook.services.availability_service import AvailabilityService
from inkbook.services.booking_service import BookingService
from inkbook.services.inquiry_service import InquiryService
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _service_from_state(request: Request, attribute: str, label: str):
    service = getattr(request.app.state, attribute, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} service is not initialized",
        )
    return service


def get_auth_service(request: Request) -> AuthService:
    return _service_from_state(request, "auth_service", "Auth")


def get_availability_service(request: Request) -> AvailabilityService:
    return _service_from_state(request, "availability_service", "Availability")


def get_booking_service(request: Request) -> BookingService:
    return _service_from_state(request, "booking_service", "Booking")


def get_inquiry_service(request: Request) -> InquiryService:
    return _service_from_state(request, "inquiry_service", "Inquiry")


async def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> None:
    """Refuse the call before any read or mutation unless the caller is an admin."""
    token = credentials.credentials if credentials is not None else None
    if not auth_service.is_admin(token):
        logger.warning("Refused %s %s: admin required", request.method, request.url.path)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def _bearer_from_header(request: Request) -> Optional[str]:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def refuses_caller(request: Request) -> bool:
    """True when the matched route is admin-only and the caller is not an admin.

    Used by error handlers that run before ``require_admin`` gets a chance to.
    """
    route = request.scope.get("route")
    dependencies = getattr(route, "dependencies", None) or []
    if not any(dep.dependency is require_admin for dep in dependencies):
        return False
    auth_service = getattr(request.app.state, "auth_service", None)
    return auth_service is None or not auth_service.is_admin(_bearer_from_header(request))
