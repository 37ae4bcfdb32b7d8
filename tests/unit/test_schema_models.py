"""Unit tests for the reCAPTCHA models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from schemas.models.recaptcha import (
    ERROR_MESSAGES,
    UNABLE_TO_VALIDATE,
    ErrorCode,
    ValidationOutcome,
    VerificationRequest,
    VerificationResult,
)

WIRE_CODES = [
    ("missing-input-secret", ErrorCode.MISSING_INPUT_SECRET, "The secret parameter is missing."),
    ("invalid-input-secret", ErrorCode.INVALID_INPUT_SECRET, "The secret parameter is invalid or malformed."),
    ("missing-input-response", ErrorCode.MISSING_INPUT_RESPONSE, "The response parameter is missing."),
    ("invalid-input-response", ErrorCode.INVALID_INPUT_RESPONSE, "The response parameter is invalid or malformed."),
    ("bad-request", ErrorCode.BAD_REQUEST, "The request is invalid or malformed."),
    (
        "timeout-or-duplicate",
        ErrorCode.TIMEOUT_OR_DUPLICATE,
        "The response is no longer valid: either is too old or has been used previously.",
    ),
]


# ── ErrorCode ─────────────────────────────────────────────────────────────────


class TestErrorCode:
    @pytest.mark.parametrize("wire, code, message", WIRE_CODES, ids=[w for w, _, _ in WIRE_CODES])
    def test_wire_round_trip_and_message(self, wire, code, message):
        decoded = ErrorCode.from_wire(wire)
        assert decoded is code
        assert decoded.wire == wire
        assert decoded.message == message

    @pytest.mark.parametrize("wire, code, message", WIRE_CODES, ids=[w for w, _, _ in WIRE_CODES])
    def test_enum_value_is_wire_string(self, wire, code, message):
        assert code.value == wire
        assert code == wire

    @pytest.mark.parametrize(
        "value", ["browser-error", "MISSING-INPUT-SECRET", "", None, 3], ids=repr
    )
    def test_unknown_values_fall_back(self, value):
        code = ErrorCode.from_wire(value)
        assert code is ErrorCode.UNSPECIFIED
        assert code.message == "Unable to validate ReCaptcha."
        assert code.wire is None

    def test_every_code_has_a_message(self):
        assert set(ERROR_MESSAGES) == set(ErrorCode)


# ── VerificationRequest ───────────────────────────────────────────────────────


def test_verification_request_form_fields():
    body = VerificationRequest(secret="s", response="tok")
    assert body.to_form() == {"secret": "s", "response": "tok"}


# ── VerificationResult ────────────────────────────────────────────────────────


class TestVerificationResult:
    def test_full_v3_payload(self):
        result = VerificationResult.model_validate(
            {
                "success": True,
                "score": 0.9,
                "action": "login",
                "challenge_ts": "2024-05-01T12:30:00Z",
                "hostname": "example.com",
                "error-codes": [],
            }
        )
        assert result.success is True
        assert result.score == 0.9
        assert result.action == "login"
        assert result.challenge_timestamp == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        assert result.hostname == "example.com"
        assert result.error_codes == []

    def test_android_payload(self):
        result = VerificationResult.model_validate(
            {"success": True, "apk_package_name": "com.example.app"}
        )
        assert result.apk_package_name == "com.example.app"
        assert result.hostname is None

    @pytest.mark.parametrize("payload", [{"success": True}, {"success": True, "score": None}])
    def test_missing_score_is_zero(self, payload):
        assert VerificationResult.model_validate(payload).score == 0.0

    def test_error_codes_decoded_in_order(self):
        result = VerificationResult.model_validate(
            {"success": False, "error-codes": ["timeout-or-duplicate", "bad-request"]}
        )
        assert result.error_codes == [ErrorCode.TIMEOUT_OR_DUPLICATE, ErrorCode.BAD_REQUEST]
        assert result.first_error is ErrorCode.TIMEOUT_OR_DUPLICATE
        assert result.error_wire_codes() == ["timeout-or-duplicate", "bad-request"]

    def test_unknown_error_code_does_not_fail_parse(self):
        result = VerificationResult.model_validate(
            {"success": False, "error-codes": ["something-new"]}
        )
        assert result.error_codes == [ErrorCode.UNSPECIFIED]
        assert result.first_error.message == UNABLE_TO_VALIDATE

    def test_first_error_without_codes(self):
        result = VerificationResult.model_validate({"success": False})
        assert result.first_error is ErrorCode.UNSPECIFIED

    def test_populate_by_field_name(self):
        result = VerificationResult(success=False, error_codes=[ErrorCode.BAD_REQUEST])
        assert result.first_error is ErrorCode.BAD_REQUEST

    def test_missing_success_rejected(self):
        with pytest.raises(PydanticValidationError):
            VerificationResult.model_validate({"score": 0.5})

    def test_frozen(self):
        result = VerificationResult(success=True)
        with pytest.raises(PydanticValidationError):
            result.success = False

    def test_dump_and_parse_back_keeps_error_codes(self):
        original = VerificationResult.model_validate(
            {
                "success": False,
                "error-codes": ["missing-input-secret", "timeout-or-duplicate", "brand-new"],
            }
        )
        dumped = original.model_dump_json(by_alias=True)
        assert '"missing-input-secret"' in dumped
        reparsed = VerificationResult.model_validate_json(dumped)
        assert reparsed.error_codes == [
            ErrorCode.MISSING_INPUT_SECRET,
            ErrorCode.TIMEOUT_OR_DUPLICATE,
            ErrorCode.UNSPECIFIED,
        ]
        assert reparsed == original

    @pytest.mark.parametrize("codes", [5, 1.5, {"bad-request": 1}], ids=repr)
    def test_non_list_error_codes_rejected(self, codes):
        with pytest.raises(PydanticValidationError):
            VerificationResult.model_validate({"success": False, "error-codes": codes})

    @pytest.mark.parametrize("score", [float("nan"), float("inf")], ids=repr)
    def test_non_finite_score_rejected(self, score):
        with pytest.raises(PydanticValidationError):
            VerificationResult.model_validate({"success": True, "score": score})


# ── ValidationOutcome ─────────────────────────────────────────────────────────


class TestValidationOutcome:
    def test_allow(self):
        outcome = ValidationOutcome.allow()
        assert outcome.allowed is True
        assert outcome.reason is None

    def test_deny_keeps_reason_and_result(self):
        result = VerificationResult(success=True, score=0.1)
        outcome = ValidationOutcome.deny("Minimun score not reached.", result)
        assert outcome.allowed is False
        assert outcome.reason == "Minimun score not reached."
        assert outcome.result == result

    def test_frozen(self):
        outcome = ValidationOutcome.allow()
        with pytest.raises(PydanticValidationError):
            outcome.allowed = False
