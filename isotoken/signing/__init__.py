"""Signing methods and the default ``alg`` registry.

Importing this package registers every built-in method exactly once.
"""

from .base import SigningMethod
from .hmac import HMACSigningMethod, HS256, HS384, HS512
from .registry import SigningMethodRegistry, default_registry, get_signing_method, register_signing_method
from .rsa import RSASigningMethod, RS256, RS384, RS512

for _method in (HS256, HS384, HS512, RS256, RS384, RS512):
    register_signing_method(_method)

__all__ = [
    "SigningMethod",
    "SigningMethodRegistry",
    "HMACSigningMethod",
    "RSASigningMethod",
    "HS256",
    "HS384",
    "HS512",
    "RS256",
    "RS384",
    "RS512",
    "default_registry",
    "get_signing_method",
    "register_signing_method",
]
