"""
reCAPTCHA verification models.

ErrorCode            — closed set of error codes reported by siteverify
VerificationRequest  — form body sent to the verification endpoint
VerificationResult   — parsed siteverify JSON response
ValidationOutcome    — allow/deny decision handed back to the host pipeline

Error codes are decoded by wire string through an explicit table, never by
position, so an unknown code from the remote service decodes to UNSPECIFIED
instead of failing the parse.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNABLE_TO_VALIDATE = "Unable to validate ReCaptcha."


class ErrorCode(str, Enum):
    MISSING_INPUT_SECRET = "missing-input-secret"
    INVALID_INPUT_SECRET = "invalid-input-secret"
    MISSING_INPUT_RESPONSE = "missing-input-response"
    INVALID_INPUT_RESPONSE = "invalid-input-response"
    BAD_REQUEST = "bad-request"
    TIMEOUT_OR_DUPLICATE = "timeout-or-duplicate"
    # not a siteverify value; stands in for codes this table does not know
    UNSPECIFIED = "unspecified"

    @classmethod
    def from_wire(cls, value: Any) -> "ErrorCode":
        """Decode a siteverify error string; unknown values map to UNSPECIFIED."""
        if not isinstance(value, str):
            return cls.UNSPECIFIED
        return _WIRE_TO_CODE.get(value, cls.UNSPECIFIED)

    @property
    def wire(self) -> Optional[str]:
        """The siteverify string for this code (None for UNSPECIFIED)."""
        return _CODE_TO_WIRE.get(self)

    @property
    def message(self) -> str:
        return ERROR_MESSAGES.get(self, UNABLE_TO_VALIDATE)


_CODE_TO_WIRE: dict[ErrorCode, str] = {
    code: code.value for code in ErrorCode if code is not ErrorCode.UNSPECIFIED
}

_WIRE_TO_CODE: dict[str, ErrorCode] = {wire: code for code, wire in _CODE_TO_WIRE.items()}

ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.MISSING_INPUT_SECRET: "The secret parameter is missing.",
    ErrorCode.INVALID_INPUT_SECRET: "The secret parameter is invalid or malformed.",
    ErrorCode.MISSING_INPUT_RESPONSE: "The response parameter is missing.",
    ErrorCode.INVALID_INPUT_RESPONSE: "The response parameter is invalid or malformed.",
    ErrorCode.BAD_REQUEST: "The request is invalid or malformed.",
    ErrorCode.TIMEOUT_OR_DUPLICATE: (
        "The response is no longer valid: either is too old or has been used previously."
    ),
    ErrorCode.UNSPECIFIED: UNABLE_TO_VALIDATE,
}


class VerificationRequest(BaseModel):
    """Form body for POST <api_url>. Built per call and dropped afterwards."""

    model_config = ConfigDict(frozen=True)

    secret: str
    response: str

    def to_form(self) -> dict[str, str]:
        return {"secret": self.secret, "response": self.response}


class VerificationResult(BaseModel):
    """Parsed siteverify response body."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    success: bool
    score: float = Field(default=0.0, allow_inf_nan=False)
    action: Optional[str] = None
    challenge_timestamp: Optional[datetime] = Field(default=None, alias="challenge_ts")
    apk_package_name: Optional[str] = None
    hostname: Optional[str] = None
    error_codes: list[ErrorCode] = Field(default_factory=list, alias="error-codes")

    @field_validator("score", mode="before")
    @classmethod
    def _score_defaults_to_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("error_codes", mode="before")
    @classmethod
    def _decode_error_codes(cls, v: Any) -> list[ErrorCode]:
        if v is None:
            return []
        if isinstance(v, (str, ErrorCode)):
            v = [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError(f"error-codes must be a list, got {type(v).__name__}")
        return [
            item if isinstance(item, ErrorCode) else ErrorCode.from_wire(item)
            for item in v
        ]

    @property
    def first_error(self) -> ErrorCode:
        """First reported error code, in the order the remote service gave them."""
        return self.error_codes[0] if self.error_codes else ErrorCode.UNSPECIFIED

    def error_wire_codes(self) -> list[Optional[str]]:
        return [code.wire for code in self.error_codes]


class ValidationOutcome(BaseModel):
    """All-or-nothing decision for a single request."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: Optional[str] = None
    result: Optional[VerificationResult] = None

    @classmethod
    def allow(cls, result: Optional[VerificationResult] = None) -> "ValidationOutcome":
        return cls(allowed=True, result=result)

    @classmethod
    def deny(
        cls, reason: str, result: Optional[VerificationResult] = None
    ) -> "ValidationOutcome":
        return cls(allowed=False, reason=reason, result=result)
