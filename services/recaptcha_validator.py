"""
reCAPTCHA validation pipeline.

Settings → (inactive: allow) → token → siteverify → interpret → score gate.

Each step either hands its value to the next one or raises ValidationError;
nothing is retried and nothing is kept between requests.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from config import ReCaptchaSettings
from errors import ConfigurationError, ValidationError
from infrastructure.captcha.protocol import CaptchaVerifier
from schemas.models.recaptcha import (
    UNABLE_TO_VALIDATE,
    ValidationOutcome,
    VerificationResult,
)
from shared.headers import RECAPTCHA_HEADER, HeaderSource, extract_token
from shared.logging import get_logger

log = get_logger(__name__)

SCORE_NOT_REACHED = "Minimun score not reached."
SETTINGS_NOT_PROVIDED = "ReCaptcha settings not provided."


def resolve_settings(settings: Optional[ReCaptchaSettings]) -> ReCaptchaSettings:
    """Return the deployment settings; their absence is never defaulted."""
    if settings is None:
        log.error("recaptcha_settings_missing")
        raise ConfigurationError(SETTINGS_NOT_PROVIDED)
    return settings


def interpret_response(response: httpx.Response) -> VerificationResult:
    """Parse a siteverify response, raising on remote-reported failure.

    Only the first error code is turned into the message; the full list is
    attached as ``details``.
    """
    try:
        result = VerificationResult.model_validate(response.json())
    except (ValueError, PydanticValidationError) as e:
        log.error("recaptcha_invalid_payload", error=str(e)[:200])
        raise ValidationError(UNABLE_TO_VALIDATE) from e

    if not result.success:
        first = result.first_error
        log.warning(
            "recaptcha_verification_failed",
            error_codes=result.error_wire_codes(),
            hostname=result.hostname,
        )
        raise ValidationError(
            first.message, details={"error_codes": result.error_wire_codes()}
        )
    return result


def gate_score(result: VerificationResult, settings: ReCaptchaSettings) -> ValidationOutcome:
    if not settings.is_use_score:
        return ValidationOutcome.allow(result)

    if not result.score >= settings.minimum_score:
        log.info(
            "recaptcha_score_below_minimum",
            score=result.score,
            minimum_score=settings.minimum_score,
            action=result.action,
        )
        return ValidationOutcome.deny(SCORE_NOT_REACHED, result)
    return ValidationOutcome.allow(result)


class ReCaptchaValidator:
    """Validates one request's reCAPTCHA token against siteverify.

    Args:
        settings: Resolved settings for this deployment.
        client: Anything with ``async verify(settings, token) -> httpx.Response``.
        header_key: Request header carrying the token.
    """

    def __init__(
        self,
        settings: ReCaptchaSettings,
        client: CaptchaVerifier,
        header_key: str = RECAPTCHA_HEADER,
    ) -> None:
        self._settings = settings
        self._client = client
        self._header_key = header_key

    @property
    def settings(self) -> ReCaptchaSettings:
        return self._settings

    async def validate(self, headers: HeaderSource) -> ValidationOutcome:
        """Run the pipeline; any failure, including a low score, raises."""
        if not self._settings.is_active:
            log.debug("recaptcha_inactive_skipped")
            return ValidationOutcome.allow()

        try:
            token = extract_token(headers, self._header_key)
        except ValidationError:
            log.info("recaptcha_token_missing")
            raise

        response = await self._client.verify(self._settings, token)
        result = interpret_response(response)
        outcome = gate_score(result, self._settings)
        if not outcome.allowed:
            raise ValidationError(outcome.reason or UNABLE_TO_VALIDATE)

        log.debug(
            "recaptcha_validated",
            score=result.score,
            action=result.action,
            hostname=result.hostname,
        )
        return outcome

    async def evaluate(self, headers: HeaderSource) -> ValidationOutcome:
        """Like validate(), but returns a denied outcome instead of raising."""
        try:
            return await self.validate(headers)
        except ValidationError as e:
            return ValidationOutcome.deny(e.message)

