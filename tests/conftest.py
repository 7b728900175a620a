"""Shared test fixtures for the IsoToken test suite.

Every parser used here gets a fixed clock so expiry checks are
deterministic. RSA keys are generated once per session.
"""

import logging
import os

# Keep settings predictable before any isotoken import reads them.
os.environ["ISOTOKEN_ENVIRONMENT"] = "development"
os.environ["ISOTOKEN_SIGNING_KEY"] = "test-signing-key"
os.environ["ISOTOKEN_LOG_FORMAT"] = "text"

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from isotoken import HS256, Parser, new_token

# 2021-01-01T00:00:00Z
FIXED_NOW = 1609459200.0


@pytest.fixture()
def now() -> float:
    return FIXED_NOW


@pytest.fixture()
def parser() -> Parser:
    """Parser on the default registry with the clock pinned to FIXED_NOW."""
    return Parser(time_func=lambda: FIXED_NOW)


@pytest.fixture()
def hmac_key() -> bytes:
    return b"super-secret-hmac-key"


@pytest.fixture(scope="session")
def rsa_private_pem() -> bytes:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def rsa_public_pem(rsa_private_pem) -> bytes:
    private_key = serialization.load_pem_private_key(rsa_private_pem, password=None)
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def make_signed(claims: dict, key: bytes = b"super-secret-hmac-key", method=HS256) -> str:
    """Factory for signed token strings."""
    return new_token(method, claims).signed_string(key)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """The CLI reconfigures the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
