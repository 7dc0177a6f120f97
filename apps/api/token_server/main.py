"""FastAPI application issuing RTC access tokens."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from .core.config import settings
from .routers import rtc as rtc_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    # Report which credentials are present without revealing them.
    logger.info("Agora app id loaded: %s", bool(settings.agora_app_id))
    logger.info("Agora certificate loaded: %s", bool(settings.agora_app_certificate))
    logger.info("Supabase JWT verification: %s", "ENABLED" if settings.has_identity_provider else "DISABLED")
    yield


app = FastAPI(title="RTC Token Server", version="0.1.0", lifespan=lifespan)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(rtc_router.router, prefix="/api/rtc", tags=["rtc"])


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, Any]:
    """Liveness probe with a summary of which credentials are configured."""

    return {
        "status": "ok",
        "service": "token-server",
        "config": {
            "has_app_id": bool(settings.agora_app_id),
            "has_app_cert": bool(settings.agora_app_certificate),
            "has_identity_provider": settings.has_identity_provider,
        },
    }


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)


@app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots() -> PlainTextResponse:
    """Serve a minimal robots.txt to avoid 404 noise."""

    return PlainTextResponse("User-agent: *\nDisallow:")
