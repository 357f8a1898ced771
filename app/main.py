"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import v1_router
from app.core.config import get_settings
from app.core.database import init_db
from app.core.exceptions import (
    UPSTREAM_RETRY_AFTER,
    FolioError,
    GenerationError,
    RateLimitError,
)
from app.core.logging import setup_logging

logger = logging.getLogger(__name__)

_settings = get_settings()
setup_logging(_settings.log_level)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: ensure tables exist (use Alembic in production)
    await init_db()
    logger.info("Folio API started (model=%s)", _settings.ai_model)
    yield


app = FastAPI(
    title="Folio",
    version="0.1.0",
    description="Portfolio builder API with an AI writing assistant",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error rendering ──────────────────────────────────────────
@app.exception_handler(FolioError)
async def folio_error_handler(request: Request, exc: FolioError) -> JSONResponse:
    headers: dict[str, str] = {}
    if isinstance(exc, RateLimitError):
        headers["Retry-After"] = str(exc.retry_after)
    elif isinstance(exc, GenerationError) and exc.retryable:
        headers["Retry-After"] = str(UPSTREAM_RETRY_AFTER)

    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


# ── API routes ───────────────────────────────────────────────
app.include_router(v1_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}
