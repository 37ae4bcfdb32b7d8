"""Shared fixtures: reCAPTCHA settings and a fake siteverify endpoint."""

from __future__ import annotations

from typing import Any, Callable, Optional
from urllib.parse import parse_qs

import httpx
import pytest

from config import ReCaptchaSettings

SITEVERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


@pytest.fixture(autouse=True)
def clear_recaptcha_env(monkeypatch):
    """Keep a developer's RECAPTCHA_* variables out of the tests."""
    for var in (
        "RECAPTCHA_API_URL",
        "RECAPTCHA_IS_ACTIVE",
        "RECAPTCHA_IS_USE_SCORE",
        "RECAPTCHA_MINIMUM_SCORE",
        "RECAPTCHA_SECRET_KEY",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_settings() -> Callable[..., ReCaptchaSettings]:
    def _make(**overrides: Any) -> ReCaptchaSettings:
        values: dict[str, Any] = dict(
            api_url=SITEVERIFY_URL,
            is_active=True,
            is_use_score=False,
            minimum_score=0.5,
            secret_key="test-secret",
        )
        values.update(overrides)
        return ReCaptchaSettings(**values)

    return _make


class FakeSiteverify:
    """httpx.MockTransport handler that records every call it answers."""

    def __init__(
        self,
        status_code: int = 200,
        json: Optional[dict] = None,
        text: Optional[str] = None,
        exc: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self.json = json if json is not None else {"success": True}
        self.text = text
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def form(self, index: int = -1) -> dict[str, list[str]]:
        return parse_qs(self.requests[index].content.decode(), keep_blank_values=True)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def siteverify() -> Callable[..., FakeSiteverify]:
    return FakeSiteverify
