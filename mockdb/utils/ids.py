"""Identifier and timestamp generation for stored records."""

from __future__ import annotations

import secrets
import string
import time
from datetime import datetime, timezone

_ALPHABET = string.digits + string.ascii_lowercase


def generate_id(prefix: str = "mock") -> str:
    """Return an opaque id shaped ``<prefix>-<epoch ms>-<9 base36 chars>``."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["generate_id", "utc_now_iso"]
