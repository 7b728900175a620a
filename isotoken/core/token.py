"""Token entity: header, claims and the signing half of the lifecycle.

A token is built with :func:`new_token`, signed with
:meth:`Token.signed_string`, and comes back from
:meth:`isotoken.core.parser.Parser.parse` with ``raw``, ``signature`` and
``valid`` filled in.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from ..exceptions import IsoTokenException, SerializationError, SigningError
from ..signing.base import SigningMethod
from ..signing.registry import default_registry
from .segments import encode_segment

logger = logging.getLogger(__name__)

TOKEN_TYPE = "JWT"


@dataclass
class Token:
    """A signed (or to-be-signed) token."""

    header: Dict[str, Any] = field(default_factory=dict)
    claims: Dict[str, Any] = field(default_factory=dict)
    method: Optional[SigningMethod] = None
    raw: str = ""
    # Only populated by parsing
    signature: str = ""
    # Only set by a successful parse
    valid: bool = False

    def signing_string(self) -> str:
        """Encode header and claims as ``<header>.<claims>``.

        Raises:
            SerializationError: If either mapping holds non-JSON values.
        """
        return ".".join(
            encode_segment(_to_json(source, part))
            for part, source in (("header", self.header), ("claims", self.claims))
        )

    def signed_string(self, key: Any) -> str:
        """Return the complete ``<header>.<claims>.<signature>`` string.

        Raises:
            SerializationError: If header or claims cannot be serialized.
            SigningError: If there is no method or the method fails.
        """
        signing_input = self.signing_string()
        if self.method is None:
            raise SigningError("token has no signing method")

        try:
            signature = self.method.sign(signing_input, key)
        except SigningError:
            raise
        except IsoTokenException as exc:
            raise SigningError(exc.message, alg=self.method.alg) from exc
        except (TypeError, ValueError) as exc:
            raise SigningError(f"{self.method.alg} signing failed: {exc}", alg=self.method.alg) from exc

        logger.debug("Signed token", extra={"alg": self.method.alg})
        return f"{signing_input}.{signature}"

    # --- typed accessors ---

    def numeric_claim(self, name: str) -> Optional[float]:
        """Return claim *name* as a number, or ``None`` if absent or not numeric.

        JSON booleans are not numbers here even though ``bool`` subclasses ``int``,
        and neither are the non-finite values ``json`` accepts (NaN, Infinity).
        """
        value = self.claims.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value

    def string_header(self, name: str) -> Optional[str]:
        """Return header *name* if it is a string, else ``None``."""
        value = self.header.get(name)
        return value if isinstance(value, str) else None


def new_token(
    method: Union[SigningMethod, str],
    claims: Optional[Dict[str, Any]] = None,
) -> Token:
    """Create an unsigned token for *method* (an instance or an ``alg`` name).

    Raises:
        SigningError: If *method* is a name with no registered method.
    """
    if isinstance(method, str):
        resolved = default_registry.get(method)
        if resolved is None:
            raise SigningError(f"signing method {method!r} is not registered", alg=method)
        method = resolved

    return Token(
        header={"typ": TOKEN_TYPE, "alg": method.alg},
        claims=dict(claims or {}),
        method=method,
    )


def _to_json(source: Dict[str, Any], part: str) -> bytes:
    """Canonical JSON: sorted keys, compact separators, UTF-8, no NaN."""
    try:
        return json.dumps(
            source,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"cannot serialize token {part}: {exc}", part=part) from exc


KeyFunc = Callable[[Token], Any]
