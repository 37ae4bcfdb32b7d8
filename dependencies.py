"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system.

Attach reCAPTCHA protection to a route with::

    @router.post("/contact", dependencies=[Depends(require_recaptcha)])
"""

from __future__ import annotations

from fastapi import Depends, Request

from config import AppSettings, ReCaptchaSettings
from infrastructure.captcha.recaptcha import ReCaptchaClient
from infrastructure.http_client import HttpClient
from schemas.models.recaptcha import ValidationOutcome
from services.recaptcha_validator import ReCaptchaValidator, resolve_settings


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_http_client(request: Request) -> HttpClient:
    """Return the shared HttpClient opened in the app lifespan."""
    return request.app.state.http_client


def get_recaptcha_settings(request: Request) -> ReCaptchaSettings:
    """Return the bound ReCaptchaSettings, or raise ConfigurationError."""
    return resolve_settings(getattr(request.app.state, "recaptcha_settings", None))


def get_recaptcha_validator(
    settings: ReCaptchaSettings = Depends(get_recaptcha_settings),
    http_client: HttpClient = Depends(get_http_client),
) -> ReCaptchaValidator:
    return ReCaptchaValidator(settings, ReCaptchaClient(http_client))


async def require_recaptcha(
    request: Request,
    validator: ReCaptchaValidator = Depends(get_recaptcha_validator),
) -> ValidationOutcome:
    """Abort the request with a ValidationError unless its token passes."""
    return await validator.validate(request.headers)
