"""Tests for the error taxonomy and the multi-flag ValidationError."""

from isotoken import (
    DecodeError,
    ErrorCode,
    InvalidKeyError,
    SigningError,
    TokenNotFoundError,
    ValidationError,
    ValidationErrorFlag,
)


class TestValidationError:

    def test_empty_error_is_valid(self):
        err = ValidationError()
        assert err.valid()
        assert str(err) == "token is invalid"
        assert err.flag_names() == []

    def test_flags_are_independent(self):
        err = ValidationError()
        err.add(ValidationErrorFlag.EXPIRED, "token is expired")
        err.add(ValidationErrorFlag.SIGNATURE_INVALID, "signature is invalid")
        assert err.expired
        assert err.signature_invalid
        assert not err.malformed
        assert not err.unverifiable
        assert not err.not_valid_yet
        assert not err.valid()
        assert str(err) == "signature is invalid"

    def test_to_dict_lists_flags(self):
        err = ValidationError("token is expired", ValidationErrorFlag.EXPIRED)
        assert err.to_dict() == {
            "error": "TOKEN_INVALID",
            "message": "token is expired",
            "details": {"flags": ["expired"]},
        }
        assert err.status_code == 401


class TestErrorCodes:

    def test_invalid_key_is_signing_error(self):
        err = InvalidKeyError("bad key", alg="RS256")
        assert isinstance(err, SigningError)
        assert err.error_code == ErrorCode.INVALID_KEY
        assert err.to_dict()["details"] == {"alg": "RS256"}

    def test_not_found(self):
        err = TokenNotFoundError()
        assert err.status_code == 401
        assert err.message == "no token present in request"

    def test_decode_error(self):
        assert DecodeError("x").to_dict() == {"error": "DECODE_ERROR", "message": "x", "details": {}}
