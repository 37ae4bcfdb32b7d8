"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests. Tests control config through monkeypatch.setenv() or
explicit keyword arguments.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def fake_http():
    """HttpClient stand-in whose post_form is an AsyncMock."""
    http = MagicMock()
    http.post_form = AsyncMock()
    return http


@pytest.fixture
def siteverify_response():
    """Factory for MagicMocks shaped like the httpx.Response siteverify sends."""

    def _make(status_code=200, payload=None, text=""):
        resp = MagicMock(status_code=status_code, text=text)
        resp.json.return_value = payload if payload is not None else {"success": True}
        return resp

    return _make
