"""Uniform ``{"message": ...}`` error bodies for every route."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkbook.controllers.dependencies import refuses_caller
from inkbook.domain.errors import InputValidationError


def validation_http_error(exc: InputValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": exc.message, "fields": exc.fields},
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"message": str(exc.detail)}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


def _field_name(location: tuple) -> str:
    parts = [part for part in location if isinstance(part, str) and part != "body"]
    return ".".join(parts) or "body"


async def _request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    # The body is parsed before route dependencies run, so the admin guard is
    # applied here too.
    if refuses_caller(request):
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"message": "Forbidden"},
        )
    fields = sorted({_field_name(tuple(error.get("loc", ()))) for error in exc.errors()})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request payload", "fields": fields},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
