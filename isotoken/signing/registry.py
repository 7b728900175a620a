"""Process-wide mapping from ``alg`` name to signing method.

Populated once at import of :mod:`isotoken.signing`; parsing only reads it.
Writes take a lock, reads do not (a dict lookup is atomic).
"""

import logging
import threading
from typing import Dict, List, Optional

from .base import SigningMethod

logger = logging.getLogger(__name__)


class SigningMethodRegistry:
    """Name -> SigningMethod lookup table."""

    def __init__(self) -> None:
        self._methods: Dict[str, SigningMethod] = {}
        self._lock = threading.Lock()

    def register(self, method: SigningMethod) -> None:
        """Register *method* under its ``alg`` name, replacing any previous one."""
        with self._lock:
            if method.alg in self._methods:
                logger.warning("Replacing signing method %s", method.alg)
            self._methods[method.alg] = method

    def get(self, alg: str) -> Optional[SigningMethod]:
        """Return the method registered for *alg*, or ``None``."""
        return self._methods.get(alg)

    def algorithms(self) -> List[str]:
        return sorted(self._methods)

    def __contains__(self, alg: object) -> bool:
        return alg in self._methods


# ---------------------------------------------------------------------------
# Default registry — filled by isotoken.signing at import time
# ---------------------------------------------------------------------------

default_registry = SigningMethodRegistry()


def register_signing_method(method: SigningMethod) -> None:
    """Register *method* in the default registry."""
    default_registry.register(method)


def get_signing_method(alg: str) -> Optional[SigningMethod]:
    """Look up *alg* in the default registry."""
    return default_registry.get(alg)
