"""Opaque pagination cursors.

A cursor is base64url JSON holding the last hit's sort values and a
fingerprint of the sort it came from. Decoding against a different sort
fails instead of silently paging through the wrong order.
"""

import base64
import binascii
import hashlib
import json

from productsearch.errors import InvalidCursorError


def sort_shape(sort: list[dict], kind: str = "") -> str:
    """Short, stable fingerprint of a sort specification and query kind."""
    canonical = json.dumps({"kind": kind, "sort": sort}, sort_keys=True, separators=(",", ":"))
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()[:12]


def encode_cursor(sort_values: list, shape: str) -> str:
    raw = json.dumps({"v": list(sort_values), "s": shape}, separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(cursor: str, shape: str) -> list:
    """Return the sort values in ``cursor``.

    Raises:
        InvalidCursorError: the cursor is malformed or was issued for another sort.
    """
    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidCursorError(f"Malformed cursor: {cursor!r}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("v"), list) or not payload["v"]:
        raise InvalidCursorError(f"Malformed cursor: {cursor!r}")
    if payload.get("s") != shape:
        raise InvalidCursorError("Cursor was issued for a different ordering")
    return payload["v"]


def encode_scope_cursor(key: int, scope: str) -> str:
    """Cursor over a single integer key (rank, like id) within a named scope."""
    return encode_cursor([key], scope)


def decode_scope_cursor(cursor: str, scope: str) -> int:
    (key,) = decode_cursor(cursor, scope)[:1]
    if not isinstance(key, int) or isinstance(key, bool):
        raise InvalidCursorError(f"Malformed cursor: {cursor!r}")
    return key
