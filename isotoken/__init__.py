"""IsoToken — compact signed tokens.

Build a token with :func:`new_token`, sign it with
:meth:`Token.signed_string`, and check it with :func:`parse`, which returns
a valid token or raises a :class:`ValidationError` whose flags say every way
the token failed.
"""

from .core.parser import Parser, get_default_parser, parse, parse_unverified, set_time_func
from .core.segments import decode_segment, encode_segment
from .core.token import KeyFunc, Token, new_token
from .exceptions import (
    DecodeError,
    ErrorCode,
    InvalidKeyError,
    IsoTokenException,
    SerializationError,
    SignatureVerificationError,
    SigningError,
    TokenNotFoundError,
    ValidationError,
    ValidationErrorFlag,
)
from .signing import (
    HS256,
    HS384,
    HS512,
    RS256,
    RS384,
    RS512,
    SigningMethod,
    SigningMethodRegistry,
    get_signing_method,
    register_signing_method,
)

__version__ = "0.1.0"

__all__ = [
    "Parser",
    "Token",
    "KeyFunc",
    "new_token",
    "parse",
    "parse_unverified",
    "get_default_parser",
    "set_time_func",
    "encode_segment",
    "decode_segment",
    "SigningMethod",
    "SigningMethodRegistry",
    "get_signing_method",
    "register_signing_method",
    "HS256",
    "HS384",
    "HS512",
    "RS256",
    "RS384",
    "RS512",
    "ErrorCode",
    "IsoTokenException",
    "DecodeError",
    "SerializationError",
    "SigningError",
    "InvalidKeyError",
    "SignatureVerificationError",
    "TokenNotFoundError",
    "ValidationError",
    "ValidationErrorFlag",
]
