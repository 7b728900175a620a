"""RSASSA-PKCS1-v1_5 signing methods (RS256, RS384, RS512).

Keys are PEM-encoded bytes or already-loaded ``cryptography`` key objects.
Signing needs the private key; verification accepts either half of the pair.
"""

from typing import Any, Type

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import load_pem_private_key, load_pem_public_key

from ..core.segments import decode_segment, encode_segment
from ..exceptions import DecodeError, InvalidKeyError, SignatureVerificationError
from .base import SigningMethod


class RSASigningMethod(SigningMethod):
    """Asymmetric signing with an RSA key pair."""

    def __init__(self, alg: str, hash_type: Type[hashes.HashAlgorithm]) -> None:
        self._alg = alg
        self._hash_type = hash_type

    @property
    def alg(self) -> str:
        return self._alg

    def sign(self, signing_input: str, key: Any) -> str:
        private_key = self._load_private_key(key)
        signature = private_key.sign(
            signing_input.encode("utf-8"),
            padding.PKCS1v15(),
            self._hash_type(),
        )
        return encode_segment(signature)

    def verify(self, signing_input: str, signature: str, key: Any) -> None:
        public_key = self._load_public_key(key)
        try:
            sig = decode_segment(signature)
        except DecodeError as exc:
            raise SignatureVerificationError(f"signature is invalid: {exc.message}") from exc

        try:
            public_key.verify(
                sig,
                signing_input.encode("utf-8"),
                padding.PKCS1v15(),
                self._hash_type(),
            )
        except InvalidSignature as exc:
            raise SignatureVerificationError() from exc

    # --- key loading ---

    def _load_private_key(self, key: Any) -> rsa.RSAPrivateKey:
        if isinstance(key, (bytes, str)):
            data = key.encode("utf-8") if isinstance(key, str) else key
            try:
                key = load_pem_private_key(data, password=None)
            except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
                raise InvalidKeyError(f"{self.alg} signing key is not a PEM private key: {exc}", alg=self.alg) from exc
        if not isinstance(key, rsa.RSAPrivateKey):
            raise InvalidKeyError(f"{self.alg} requires an RSA private key for signing", alg=self.alg)
        return key

    def _load_public_key(self, key: Any) -> rsa.RSAPublicKey:
        if isinstance(key, (bytes, str)):
            data = key.encode("utf-8") if isinstance(key, str) else key
            if b"PRIVATE KEY" in data:
                key = self._load_private_key(data)
            else:
                try:
                    key = load_pem_public_key(data)
                except (ValueError, UnsupportedAlgorithm) as exc:
                    raise InvalidKeyError(
                        f"{self.alg} verification key is not a PEM public key: {exc}", alg=self.alg
                    ) from exc
        if isinstance(key, rsa.RSAPrivateKey):
            key = key.public_key()
        if not isinstance(key, rsa.RSAPublicKey):
            raise InvalidKeyError(f"{self.alg} requires an RSA key for verification", alg=self.alg)
        return key


RS256 = RSASigningMethod("RS256", hashes.SHA256)
RS384 = RSASigningMethod("RS384", hashes.SHA384)
RS512 = RSASigningMethod("RS512", hashes.SHA512)
