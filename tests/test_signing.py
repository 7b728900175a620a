"""Tests for the built-in signing methods and the alg registry."""

import hashlib
import hmac

import pytest

from isotoken import (
    HS256,
    HS384,
    HS512,
    RS256,
    RS384,
    RS512,
    InvalidKeyError,
    SignatureVerificationError,
    SigningMethodRegistry,
    ValidationError,
    decode_segment,
    encode_segment,
    get_signing_method,
    new_token,
)
from isotoken.signing import HMACSigningMethod
from tests.conftest import make_signed


class TestDefaultRegistry:

    @pytest.mark.parametrize("method", [HS256, HS384, HS512, RS256, RS384, RS512])
    def test_builtins_registered(self, method):
        assert get_signing_method(method.alg) is method

    def test_unknown_alg(self):
        assert get_signing_method("none") is None


class TestRegistry:

    def test_register_and_lookup(self):
        registry = SigningMethodRegistry()
        registry.register(HS256)
        assert registry.get("HS256") is HS256
        assert "HS256" in registry
        assert "HS384" not in registry
        assert registry.algorithms() == ["HS256"]

    def test_later_registration_replaces(self):
        registry = SigningMethodRegistry()
        replacement = HMACSigningMethod("HS256", hashlib.sha256)
        registry.register(HS256)
        registry.register(replacement)
        assert registry.get("HS256") is replacement


class TestHMAC:

    def test_matches_reference_hmac(self, hmac_key):
        signing_input = "eyJhbGciOiJIUzI1NiJ9.e30"
        expected = encode_segment(hmac.new(hmac_key, signing_input.encode(), hashlib.sha256).digest())
        assert HS256.sign(signing_input, hmac_key) == expected

    @pytest.mark.parametrize("method,size", [(HS256, 32), (HS384, 48), (HS512, 64)])
    def test_digest_sizes(self, hmac_key, method, size):
        assert len(decode_segment(method.sign("a.b", hmac_key))) == size

    def test_str_key_accepted(self):
        assert HS256.sign("a.b", "secret") == HS256.sign("a.b", b"secret")

    def test_verify_ok(self, hmac_key):
        HS256.verify("a.b", HS256.sign("a.b", hmac_key), hmac_key)

    def test_verify_wrong_input(self, hmac_key):
        with pytest.raises(SignatureVerificationError):
            HS256.verify("a.c", HS256.sign("a.b", hmac_key), hmac_key)

    def test_verify_cross_algorithm(self, hmac_key):
        with pytest.raises(SignatureVerificationError):
            HS512.verify("a.b", HS256.sign("a.b", hmac_key), hmac_key)

    def test_non_bytes_key(self):
        with pytest.raises(InvalidKeyError):
            HS256.sign("a.b", None)


class TestRSA:

    @pytest.mark.parametrize("method", [RS256, RS384, RS512])
    def test_sign_with_private_verify_with_public(self, method, rsa_private_pem, rsa_public_pem):
        signature = method.sign("a.b", rsa_private_pem)
        method.verify("a.b", signature, rsa_public_pem)

    def test_verify_accepts_private_key(self, rsa_private_pem):
        RS256.verify("a.b", RS256.sign("a.b", rsa_private_pem), rsa_private_pem)

    def test_verify_rejects_other_input(self, rsa_private_pem, rsa_public_pem):
        with pytest.raises(SignatureVerificationError):
            RS256.verify("a.c", RS256.sign("a.b", rsa_private_pem), rsa_public_pem)

    def test_sign_with_public_key_fails(self, rsa_public_pem):
        with pytest.raises(InvalidKeyError):
            RS256.sign("a.b", rsa_public_pem)

    def test_verify_with_garbage_key_fails(self):
        with pytest.raises(InvalidKeyError):
            RS256.verify("a.b", "c2ln", b"not a pem")

    def test_full_round_trip(self, parser, rsa_private_pem, rsa_public_pem):
        signed = make_signed({"sub": "svc"}, rsa_private_pem, method=RS256)
        token = parser.parse(signed, lambda t: rsa_public_pem)
        assert token.valid
        assert token.claims == {"sub": "svc"}

    def test_hmac_key_confusion_rejected(self, parser, rsa_public_pem):
        """An HS256 token signed with the RSA public key must not pass as RS256."""
        forged = new_token(HS256, {"sub": "attacker"})
        forged.header["alg"] = "RS256"
        head = forged.signing_string()
        signature = HS256.sign(head, rsa_public_pem)
        with pytest.raises(ValidationError) as exc_info:
            parser.parse(f"{head}.{signature}", lambda t: rsa_public_pem)
        assert exc_info.value.signature_invalid
