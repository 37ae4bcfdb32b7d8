"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

import sentry_sdk
from fastapi import FastAPI

from config import AppSettings
from errors import register_error_handlers
from infrastructure.http_client import HttpClient
from middleware.recaptcha import add_recaptcha_validator
from routes.health_routes import router as health_router
from shared.logging import setup_logging


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    protected_paths: Sequence[str] = (),
    http_client: Optional[HttpClient] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    Args:
        settings: Application settings; loaded from the environment when None.
        protected_paths: Path prefixes guarded by ReCaptchaMiddleware.
        http_client: Pre-built client for the verification endpoint
            (a fresh one is opened in the lifespan otherwise).
    """
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        client = http_client if http_client is not None else HttpClient()
        app.state.http_client = client

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    add_recaptcha_validator(app, settings.recaptcha, protected_paths=protected_paths)
    register_error_handlers(app)
    app.include_router(health_router)

    return app
