"""Google reCAPTCHA siteverify client.

One POST per validated request, form-encoded secret + token, no retries.
Transport failures and non-200 answers raise the same ValidationError; the
log line is what tells them apart.
"""

import httpx

from config import ReCaptchaSettings
from errors import ValidationError
from infrastructure.http_client import HttpClient
from schemas.models.recaptcha import UNABLE_TO_VALIDATE, VerificationRequest
from shared.logging import get_logger

log = get_logger(__name__)


class ReCaptchaClient:
    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    async def verify(self, settings: ReCaptchaSettings, token: str) -> httpx.Response:
        body = VerificationRequest(secret=settings.secret_key, response=token)
        try:
            response = await self._http.post_form(settings.api_url, body.to_form())
        except httpx.HTTPError as e:
            log.error(
                "recaptcha_request_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ValidationError(UNABLE_TO_VALIDATE) from e

        if response.status_code != 200:
            log.error(
                "recaptcha_api_error",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise ValidationError(UNABLE_TO_VALIDATE)
        return response
