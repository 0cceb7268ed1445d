from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from src.api.router import api_router
from src.core.config import get_cors_origins, get_settings
from src.core.errors import (
    AppError,
    app_error_handler,
    upstream_error_handler,
    validation_error_handler,
)
from src.core.logging import configure_logging
from src.core.supabase import SupabaseClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info(
        "%s starting (environment=%s, analytics workers=%s)",
        settings.app_name,
        settings.environment,
        settings.analytics_max_concurrency,
    )
    yield
    SupabaseClient.close_shared_client()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Occupancy, pricing and commission analytics for rental objects.",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix=settings.api_prefix)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(httpx.HTTPError, upstream_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app


app = create_app()
