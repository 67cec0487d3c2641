"""Timestamp helpers for Notion date strings.

Notion sends dates either as plain days (``2024-03-01``) or as ISO-8601
timestamps with a ``Z`` or numeric offset.  A date entered with a time zone
arrives without an offset and names its IANA zone separately.  Everything
is normalised to timezone-aware UTC datetimes; plain days and naive
timestamps are read in the named zone, or as UTC when there is none.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _zone(name: str | None) -> tzinfo:
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def parse_datetime(value: str | None, time_zone: str | None = None) -> datetime | None:
    """Parse a Notion date or timestamp string, or return ``None``.

    *time_zone* is the IANA zone a naive value was entered in; unknown
    zones fall back to UTC.

    >>> parse_datetime("2024-03-01")
    datetime.datetime(2024, 3, 1, 0, 0, tzinfo=datetime.timezone.utc)
    >>> parse_datetime("2024-03-01T09:00:00", "Asia/Seoul").hour
    0
    >>> parse_datetime("not a date") is None
    True
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=_zone(time_zone))
    return parsed.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    """Format *value* as UTC with millisecond precision and a ``Z`` suffix.

    >>> to_iso(EPOCH)
    '1970-01-01T00:00:00.000Z'
    """
    utc = value.astimezone(timezone.utc) if value.tzinfo else value
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
