"""Signing method interface.

A signing method turns a signing input (``header.claims`` as encoded
segments) plus a key into an encoded signature segment, and checks such a
signature later. Concrete methods live beside this module and register
themselves in :mod:`isotoken.signing.registry`.
"""

from abc import ABC, abstractmethod
from typing import Any


class SigningMethod(ABC):
    """Sign/verify capability identified by its ``alg`` name."""

    @property
    @abstractmethod
    def alg(self) -> str:
        """Algorithm name as it appears in the token header."""

    @abstractmethod
    def sign(self, signing_input: str, key: Any) -> str:
        """Return the base64url-encoded signature for *signing_input*.

        Raises:
            InvalidKeyError: If *key* cannot be used by this method.
        """

    @abstractmethod
    def verify(self, signing_input: str, signature: str, key: Any) -> None:
        """Check *signature* (still base64url-encoded) against *signing_input*.

        Raises:
            SignatureVerificationError: If the signature does not match.
            InvalidKeyError: If *key* cannot be used by this method.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.alg}>"
