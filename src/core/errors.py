from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class AppError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(code="not_found", message=message, status_code=404)


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(code="bad_request", message=message, status_code=400)


class InvalidArgumentError(BadRequestError):
    """Caller-supplied parameters the engine cannot compute with. Never retried."""

    def __init__(self, message: str = "Invalid argument") -> None:
        super().__init__(message)
        self.code = "invalid_argument"


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    envelope = ErrorEnvelope(error=ErrorDetail(code=exc.code, message=exc.message))
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump())


def upstream_error_handler(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    logger.error("Data backend request failed during %s: %s", request.url.path, exc)
    details: Optional[Dict[str, Any]] = None
    if isinstance(exc, httpx.HTTPStatusError):
        details = {"status": exc.response.status_code}
    envelope = ErrorEnvelope(
        error=ErrorDetail(code="upstream_error", message="Data backend unavailable", details=details)
    )
    return JSONResponse(status_code=502, content=envelope.model_dump())


def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    envelope = ErrorEnvelope(
        error=ErrorDetail(
            code="validation_error",
            message="Validation error",
            details={"errors": exc.errors()},
        )
    )
    return JSONResponse(status_code=422, content=envelope.model_dump())
