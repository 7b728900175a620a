"""Custom exception hierarchy for IsoToken."""

from enum import Enum, IntFlag
from typing import TYPE_CHECKING, Optional, Dict, Any, List

if TYPE_CHECKING:
    from .core.token import Token


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Codec errors
    DECODE_ERROR = "DECODE_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"

    # Signing errors
    SIGNING_ERROR = "SIGNING_ERROR"
    INVALID_KEY = "INVALID_KEY"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"

    # Validation errors
    TOKEN_INVALID = "TOKEN_INVALID"
    TOKEN_NOT_FOUND = "TOKEN_NOT_FOUND"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class IsoTokenException(Exception):
    """
    Base exception for all IsoToken errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class DecodeError(IsoTokenException):
    """A token segment is not valid unpadded base64url."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DECODE_ERROR, status_code=400)


class SerializationError(IsoTokenException):
    """Header or claims could not be serialized to JSON."""

    def __init__(self, message: str, part: Optional[str] = None):
        details = {"part": part} if part else {}
        super().__init__(
            message,
            ErrorCode.SERIALIZATION_ERROR,
            status_code=500,
            details=details
        )


class SigningError(IsoTokenException):
    """The signing method failed to produce a signature."""

    def __init__(
        self,
        message: str,
        alg: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.SIGNING_ERROR,
    ):
        details = {"alg": alg} if alg else {}
        super().__init__(
            message,
            error_code,
            status_code=500,
            details=details
        )


class InvalidKeyError(SigningError):
    """Key is of the wrong type or shape for the signing method."""

    def __init__(self, message: str = "key is invalid", alg: Optional[str] = None):
        super().__init__(message, alg=alg, error_code=ErrorCode.INVALID_KEY)


class SignatureVerificationError(IsoTokenException):
    """Signature does not match the signing input."""

    def __init__(self, message: str = "signature is invalid"):
        super().__init__(message, ErrorCode.SIGNATURE_INVALID, status_code=401)


class TokenNotFoundError(IsoTokenException):
    """Request carries no token in any supported location."""

    def __init__(self, message: str = "no token present in request"):
        super().__init__(message, ErrorCode.TOKEN_NOT_FOUND, status_code=401)


class ValidationErrorFlag(IntFlag):
    """Independent failure categories collected while validating a token."""

    NONE = 0
    MALFORMED = 1
    UNVERIFIABLE = 2
    SIGNATURE_INVALID = 4
    EXPIRED = 8
    NOT_VALID_YET = 16


class ValidationError(IsoTokenException):
    """Aggregated token validation failure.

    Several flags may be set at once (an expired token with a bad signature
    reports both). ``token`` is the token as far as it could be decoded, or
    ``None`` when the input did not even split into three segments.
    """

    def __init__(
        self,
        message: str = "",
        flags: ValidationErrorFlag = ValidationErrorFlag.NONE,
        token: Optional["Token"] = None,
    ):
        self.flags = flags
        self.token = token
        super().__init__(message, ErrorCode.TOKEN_INVALID, status_code=401)

    def __str__(self) -> str:
        return self.message or "token is invalid"

    def add(self, flag: ValidationErrorFlag, message: str) -> None:
        """Set *flag*; the latest message wins."""
        self.flags |= flag
        self.message = message
        self.args = (message,)

    def valid(self) -> bool:
        return self.flags == ValidationErrorFlag.NONE

    @property
    def malformed(self) -> bool:
        return bool(self.flags & ValidationErrorFlag.MALFORMED)

    @property
    def unverifiable(self) -> bool:
        return bool(self.flags & ValidationErrorFlag.UNVERIFIABLE)

    @property
    def signature_invalid(self) -> bool:
        return bool(self.flags & ValidationErrorFlag.SIGNATURE_INVALID)

    @property
    def expired(self) -> bool:
        return bool(self.flags & ValidationErrorFlag.EXPIRED)

    @property
    def not_valid_yet(self) -> bool:
        return bool(self.flags & ValidationErrorFlag.NOT_VALID_YET)

    def flag_names(self) -> List[str]:
        """Names of the set flags, lowercase, in declaration order."""
        return [
            flag.name.lower()
            for flag in ValidationErrorFlag
            if flag is not ValidationErrorFlag.NONE and self.flags & flag
        ]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["message"] = str(self)
        data["details"] = {**self.details, "flags": self.flag_names()}
        return data
