"""Controller layer for admin login and service health."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import Field

from inkbook.controllers.dependencies import bearer_scheme, get_auth_service
from inkbook.controllers.schemas import CamelModel
from inkbook.services.auth_service import (
    AdminTokenNotConfiguredError,
    AuthService,
    InvalidAdminTokenError,
)
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


class LoginRequest(CamelModel):
    admin_token: str = Field(min_length=1)


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"


class HealthResponse(CamelModel):
    status: str


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    try:
        bearer = auth_service.login(payload.admin_token)
        return LoginResponse(access_token=bearer)
    except (AdminTokenNotConfiguredError, InvalidAdminTokenError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected login failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to login",
        ) from exc


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> None:
    if credentials is not None:
        auth_service.logout(credentials.credentials)
