"""Shared async HTTP client for the verification endpoint."""

from typing import Any, Optional

import httpx

# httpx's own default; the verification call gets no timeout override
DEFAULT_TIMEOUT = 5.0


class HttpClient:
    """Thin async wrapper around one pooled httpx.AsyncClient.

    Created once in the app lifespan and shared by every request; nothing
    about a verification call outlives the call itself.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def post_form(self, url: str, fields: dict[str, str]) -> httpx.Response:
        """POST *fields* as ``application/x-www-form-urlencoded``."""
        return await self._client.post(url, data=fields)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
