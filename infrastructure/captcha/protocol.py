"""CaptchaVerifier protocol — the validator depends on this, not the concrete client."""

from typing import Protocol

import httpx

from config import ReCaptchaSettings


class CaptchaVerifier(Protocol):
    async def verify(self, settings: ReCaptchaSettings, token: str) -> httpx.Response: ...
