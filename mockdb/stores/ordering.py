"""
Caller-side ordering of records by timestamp.

Stores return records in insertion order. Views that need chronological
order (a chat transcript, a notification feed) sort here. The persisted
timestamp field may be missing on records written by older clients, so the
client-supplied field is used as a fallback.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from mockdb.domain.models import Record

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Interpret ISO-8601 strings, datetimes and epoch milliseconds.

    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def record_time(record: Record, field: str = "createdAt", fallback: str = "timestamp") -> datetime:
    return parse_timestamp(record.get(field)) or parse_timestamp(record.get(fallback)) or _EPOCH


def sort_by_timestamp(
    records: Iterable[Record],
    field: str = "createdAt",
    fallback: str = "timestamp",
    reverse: bool = False,
) -> List[Record]:
    """
    Return records ordered by ``field``, falling back to ``fallback``.

    Records carrying neither sort as the epoch. The sort is stable, so ties
    keep insertion order.
    """
    return sorted(records, key=lambda r: record_time(r, field, fallback), reverse=reverse)


__all__ = ["parse_timestamp", "record_time", "sort_by_timestamp"]
