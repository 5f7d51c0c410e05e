"""
Base64url codec used by JWT segments and JWK members.

Failures are reported as an empty result rather than an exception, so
callers must only treat ``b""`` as success where the content may
legitimately be empty.
"""

from __future__ import annotations

import base64
import binascii
import string

_ALPHABET = frozenset(string.ascii_letters + string.digits + "-_")


def decode(value: str) -> bytes:
    """
    Decode unpadded (or correctly padded) base64url text.

    At most two trailing ``=`` are accepted, and only when the length is a
    multiple of 4. Any other character outside the URL-safe alphabet,
    including ``=`` in the middle, makes the input invalid.
    """
    if len(value) % 4 == 0 and value.endswith("="):
        value = value[:-1]
        if value.endswith("="):
            value = value[:-1]

    if any(c not in _ALPHABET for c in value):
        return b""

    remainder = len(value) % 4
    if remainder == 1:
        return b""
    if remainder:
        value += "=" * (4 - remainder)

    try:
        return base64.urlsafe_b64decode(value)
    except binascii.Error:
        return b""


def encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_uint(value: str) -> int | None:
    """
    Decode a base64url big-endian unsigned integer (JWK ``n``, ``e``, ``x``, ``y``).

    Returns None when the text does not decode to at least one byte.
    """
    raw = decode(value)
    if not raw:
        return None
    return int.from_bytes(raw, byteorder="big")


def encode_uint(value: int) -> str:
    """Encode a non-negative integer as minimal big-endian base64url."""
    byte_length = max(1, (value.bit_length() + 7) // 8)
    return encode(value.to_bytes(byte_length, byteorder="big"))
