"""reCAPTCHA enforcement middleware and registration hook.

Two ways to protect endpoints:

- per route: ``Depends(require_recaptcha)`` (see dependencies.py)
- per path prefix: ``ReCaptchaMiddleware`` registered by
  ``add_recaptcha_validator(app, settings, protected_paths=[...])``

Requests outside the protected prefixes, and CORS preflight (OPTIONS)
requests, are passed through unchanged.
"""

from __future__ import annotations

from typing import Optional, Sequence

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config import ReCaptchaSettings
from errors import AppError
from infrastructure.captcha.recaptcha import ReCaptchaClient
from services.recaptcha_validator import ReCaptchaValidator, resolve_settings
from shared.logging import get_logger

log = get_logger(__name__)


class ReCaptchaMiddleware(BaseHTTPMiddleware):
    """Validate the reCAPTCHA token of every request under *protected_paths*."""

    def __init__(self, app: ASGIApp, protected_paths: Sequence[str] = ()) -> None:
        super().__init__(app)
        self._protected_paths = tuple(protected_paths)

    def _is_protected(self, request: Request) -> bool:
        if request.method == "OPTIONS":
            return False
        return request.url.path.startswith(self._protected_paths)

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        if not self._protected_paths or not self._is_protected(request):
            return await call_next(request)

        state = request.app.state
        try:
            settings = resolve_settings(getattr(state, "recaptcha_settings", None))
            validator = ReCaptchaValidator(settings, ReCaptchaClient(state.http_client))
            await validator.validate(request.headers)
        except AppError as exc:
            log.warning(
                "recaptcha_request_rejected",
                path=request.url.path,
                error_code=exc.error_code,
                reason=exc.message,
            )
            return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

        return await call_next(request)


def add_recaptcha_validator(
    app: FastAPI,
    settings: Optional[ReCaptchaSettings],
    protected_paths: Sequence[str] = (),
) -> None:
    """Bind *settings* to the app once at startup.

    With *protected_paths*, also installs ReCaptchaMiddleware for those
    prefixes. Must be called before the app starts serving requests.
    """
    if settings is None:
        log.warning("recaptcha_settings_not_configured")
    app.state.recaptcha_settings = settings
    if protected_paths:
        app.add_middleware(ReCaptchaMiddleware, protected_paths=protected_paths)
