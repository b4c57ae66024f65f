"""FastAPI application entrypoint."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from monsterverify import __version__
from monsterverify.api.errors import register_exception_handlers
from monsterverify.api.middleware import RequestIDMiddleware, RequestLoggingMiddleware
from monsterverify.api.router import api_router
from monsterverify.config import Settings, settings
from monsterverify.services.codes import CodeStore
from monsterverify.services.email import EmailService, get_email_capability
from monsterverify.services.verification import VerificationService
from monsterverify.tasks.cleanup import run_code_sweeper

logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking
if settings.sentry_dsn:
    import sentry_sdk

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
    )
    logger.info("Sentry initialized")


def build_verification_service(config: Settings) -> VerificationService:
    """Wire the code store and email capability into a verification service."""
    email = EmailService(capability=get_email_capability(config), app_name=config.app_name)
    return VerificationService(
        store=CodeStore(),
        email=email,
        ttl=timedelta(seconds=config.code_ttl_seconds),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup: sweep expired codes in the background
    sweeper: asyncio.Task | None = None
    if settings.code_purge_interval_seconds > 0:
        sweeper = asyncio.create_task(
            run_code_sweeper(app.state.verification_service, settings.code_purge_interval_seconds)
        )
    yield
    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper


app = FastAPI(
    title="Monster Future AI Verification API",
    description="Email verification codes for Monster Future AI",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug_enabled else None,
    redoc_url="/api/redoc" if settings.debug_enabled else None,
    openapi_url="/api/openapi.json" if settings.debug_enabled else None,
)

app.state.verification_service = build_verification_service(settings)

register_exception_handlers(app)

# Request logging runs inside the request ID middleware so log lines carry the ID
app.add_middleware(RequestLoggingMiddleware)  # type: ignore[arg-type]
app.add_middleware(RequestIDMiddleware)  # type: ignore[arg-type]

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

# Include API router
app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    from monsterverify.logging import get_uvicorn_log_config

    uvicorn.run(
        "monsterverify.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_config=get_uvicorn_log_config(),
    )
