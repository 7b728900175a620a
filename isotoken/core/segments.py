"""base64url helpers for token segments (no padding, URL-safe alphabet)."""

import base64
import binascii
import re

from ..exceptions import DecodeError

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]*")


def encode_segment(data: bytes) -> str:
    """Encode *data* as base64url with the trailing ``=`` padding stripped."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_segment(segment: str) -> bytes:
    """Decode an unpadded base64url segment.

    Raises:
        DecodeError: On characters outside the URL-safe alphabet or a length
            that no base64 encoding can produce (``len % 4 == 1``).
    """
    if not _SEGMENT_RE.fullmatch(segment):
        raise DecodeError("illegal base64url data: unexpected character in segment")

    remainder = len(segment) % 4
    if remainder == 1:
        raise DecodeError("illegal base64url data: invalid segment length")
    if remainder:
        segment += "=" * (4 - remainder)

    try:
        return base64.urlsafe_b64decode(segment)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"illegal base64url data: {exc}") from exc
