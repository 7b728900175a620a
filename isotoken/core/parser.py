"""Parse and validate encoded tokens.

Structural problems (segment count, base64, JSON) and an unusable algorithm
or key stop the pipeline at once. Once a method and key are known the
temporal checks and the signature check all run, and every failure is
reported together on one :class:`~isotoken.exceptions.ValidationError`.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from ..exceptions import (
    DecodeError,
    IsoTokenException,
    ValidationError,
    ValidationErrorFlag,
)
from ..signing.registry import SigningMethodRegistry, default_registry
from .segments import decode_segment
from .token import KeyFunc, Token

logger = logging.getLogger(__name__)

TimeFunc = Callable[[], float]


class Parser:
    """Token parser bound to a signing-method registry and a clock.

    Args:
        registry: Where ``alg`` names are resolved. Defaults to the
            process-wide registry filled by :mod:`isotoken.signing`.
        time_func: Returns the current Unix time in seconds. Defaults to
            ``time.time``; tests inject a fixed clock.
    """

    def __init__(
        self,
        registry: Optional[SigningMethodRegistry] = None,
        time_func: Optional[TimeFunc] = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry
        self.time_func = time_func or time.time

    def parse(self, token_string: str, key_func: KeyFunc) -> Token:
        """Decode *token_string*, verify it with the key from *key_func*.

        *key_func* receives the decoded but unverified token, so it can pick a
        key by ``kid`` or ``alg``. It is called exactly once, and only after
        the algorithm has been resolved.

        Returns:
            The token, with ``valid`` set.

        Raises:
            ValidationError: On any failure. ``exc.token`` holds the token as
                far as it was decoded (``None`` for a wrong segment count).
        """
        token, parts = self._decode(token_string)

        alg = token.string_header("alg")
        if alg is None:
            raise self._reject(token, ValidationErrorFlag.UNVERIFIABLE, "signing method (alg) is unspecified")
        method = self.registry.get(alg)
        if method is None:
            raise self._reject(token, ValidationErrorFlag.UNVERIFIABLE, "signing method (alg) is unavailable")
        token.method = method

        try:
            key = key_func(token)
        except Exception as exc:
            message = exc.message if isinstance(exc, IsoTokenException) else str(exc)
            raise self._reject(token, ValidationErrorFlag.UNVERIFIABLE, message or "key lookup failed") from exc

        error = ValidationError(token=token)
        self._check_times(token, error)

        verify_error: Optional[Exception] = None
        try:
            method.verify(".".join(parts[:2]), parts[2], key)
        except Exception as exc:
            verify_error = exc
            message = exc.message if isinstance(exc, IsoTokenException) else str(exc)
            error.add(ValidationErrorFlag.SIGNATURE_INVALID, message or "signature is invalid")

        if not error.valid():
            logger.info("Token rejected", extra={"alg": alg, "flags": error.flag_names()})
            raise error from verify_error

        token.valid = True
        return token

    def parse_unverified(self, token_string: str) -> Token:
        """Decode header and claims without checking key, times or signature.

        The method is attached when the header names a registered ``alg``.
        Never marks the token valid.

        Raises:
            ValidationError: Only for malformed input.
        """
        token, _ = self._decode(token_string)
        alg = token.string_header("alg")
        if alg is not None:
            token.method = self.registry.get(alg)
        return token

    # --- pipeline stages ---

    def _decode(self, token_string: str) -> Tuple[Token, list]:
        parts = token_string.split(".")
        if len(parts) != 3:
            raise ValidationError(
                "token contains an invalid number of segments",
                ValidationErrorFlag.MALFORMED,
            )

        token = Token(raw=token_string, signature=parts[2])
        try:
            token.header = _decode_object(parts[0], "header")
            token.claims = _decode_object(parts[1], "claims")
        except DecodeError as exc:
            raise self._reject(token, ValidationErrorFlag.MALFORMED, exc.message) from exc
        return token, parts

    def _check_times(self, token: Token, error: ValidationError) -> None:
        now = int(self.time_func())

        exp = token.numeric_claim("exp")
        if exp is not None and now > int(exp):
            error.add(ValidationErrorFlag.EXPIRED, "token is expired")

        nbf = token.numeric_claim("nbf")
        if nbf is not None and now < int(nbf):
            error.add(ValidationErrorFlag.NOT_VALID_YET, "token is not valid yet")

    @staticmethod
    def _reject(token: Token, flag: ValidationErrorFlag, message: str) -> ValidationError:
        logger.info("Token rejected", extra={"flags": [flag.name.lower()], "reason": message})
        return ValidationError(message, flag, token=token)


def _decode_object(segment: str, part: str) -> Dict[str, Any]:
    """Segment-decode and JSON-parse *segment*, which must hold an object."""
    raw = decode_segment(segment)
    try:
        value = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"token {part} is not valid JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise DecodeError(f"token {part} is not a JSON object")
    return value


# ---------------------------------------------------------------------------
# Module-level convenience — one shared default parser
# ---------------------------------------------------------------------------

_default_parser = Parser()


def get_default_parser() -> Parser:
    return _default_parser


def set_time_func(time_func: Optional[TimeFunc]) -> None:
    """Replace the default parser's clock (``None`` restores ``time.time``)."""
    _default_parser.time_func = time_func or time.time


def parse(token_string: str, key_func: KeyFunc) -> Token:
    """Parse with the default parser. See :meth:`Parser.parse`."""
    return _default_parser.parse(token_string, key_func)


def parse_unverified(token_string: str) -> Token:
    """Decode with the default parser. See :meth:`Parser.parse_unverified`."""
    return _default_parser.parse_unverified(token_string)
