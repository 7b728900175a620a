"""HMAC-SHA2 signing methods (HS256, HS384, HS512)."""

import hashlib
import hmac
from typing import Any, Callable

from ..core.segments import decode_segment, encode_segment
from ..exceptions import DecodeError, InvalidKeyError, SignatureVerificationError
from .base import SigningMethod


class HMACSigningMethod(SigningMethod):
    """Symmetric signing with a shared secret.

    Keys are ``bytes``; ``str`` keys are encoded as UTF-8.
    """

    def __init__(self, alg: str, digest: Callable[..., Any]) -> None:
        self._alg = alg
        self._digest = digest

    @property
    def alg(self) -> str:
        return self._alg

    def sign(self, signing_input: str, key: Any) -> str:
        return encode_segment(self._mac(signing_input, key))

    def verify(self, signing_input: str, signature: str, key: Any) -> None:
        try:
            provided = decode_segment(signature)
        except DecodeError as exc:
            raise SignatureVerificationError(f"signature is invalid: {exc.message}") from exc

        if not hmac.compare_digest(self._mac(signing_input, key), provided):
            raise SignatureVerificationError()

    def _mac(self, signing_input: str, key: Any) -> bytes:
        return hmac.new(self._coerce_key(key), signing_input.encode("utf-8"), self._digest).digest()

    def _coerce_key(self, key: Any) -> bytes:
        if isinstance(key, str):
            key = key.encode("utf-8")
        if not isinstance(key, (bytes, bytearray)):
            raise InvalidKeyError(f"{self.alg} requires a bytes key, got {type(key).__name__}", alg=self.alg)
        return bytes(key)


HS256 = HMACSigningMethod("HS256", hashlib.sha256)
HS384 = HMACSigningMethod("HS384", hashlib.sha384)
HS512 = HMACSigningMethod("HS512", hashlib.sha512)
