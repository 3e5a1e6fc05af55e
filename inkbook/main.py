"""FastAPI application bootstrap and lifecycle wiring."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from inkbook.controllers.auth_controller import router as auth_router
from inkbook.controllers.availability_controller import router as availability_router
from inkbook.controllers.booking_controller import router as booking_router
from inkbook.controllers.errors import register_error_handlers
from inkbook.controllers.inquiry_controller import router as inquiry_router
from inkbook.repository.base import StudioRepository
from inkbook.repository.factory import build_repository
from inkbook.services.auth_service import AuthService
from inkbook.services.availability_service import AvailabilityService
from inkbook.services.booking_service import BookingService
from inkbook.services.inquiry_service import InquiryService
from inkbook.utils.config import Settings, get_settings
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[StudioRepository] = None,
) -> FastAPI:
    """Build the app with every service wired to one injected repository."""
    settings = settings or get_settings()
    repository = repository or build_repository(settings)

    availability_service = AvailabilityService(repository=repository, settings=settings)
    booking_service = BookingService(repository=repository, settings=settings)
    inquiry_service = InquiryService(repository=repository, settings=settings)
    auth_service = AuthService(settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    register_error_handlers(app)

    for router in (auth_router, availability_router, booking_router, inquiry_router):
        app.include_router(router, prefix=settings.api_prefix)

    app.state.repository = repository
    app.state.availability_service = availability_service
    app.state.booking_service = booking_service
    app.state.inquiry_service = inquiry_service
    app.state.auth_service = auth_service

    return app


def startup(app: FastAPI) -> None:
    """Create the schema; safe to re-run on every restart."""
    repository: StudioRepository = app.state.repository
    repository.initialize_database()
    if not app.state.auth_service.auth_configured:
        logger.warning("ADMIN_TOKEN is not set; all admin operations will be refused")
    logger.info("System startup completed")
