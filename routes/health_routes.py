"""
Health check endpoint.

GET /health — reports whether reCAPTCHA validation is configured.
Rules:
- settings missing → "unhealthy" (503) — every protected request would fail.
- settings present but inactive → "degraded" (200) — requests pass unchecked.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    settings = getattr(request.app.state, "recaptcha_settings", None)
    if settings is None:
        checks["recaptcha"] = "not_configured"
        overall = "unhealthy"
    elif not settings.is_active:
        checks["recaptcha"] = "inactive"
        overall = "degraded"
    else:
        checks["recaptcha"] = "ok"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content={"status": overall, "checks": checks},
    )
