"""Time parsing for meta values."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time
from typing import Any

from dateutil import parser as date_parser

ZERO_TIME = datetime.min.replace(tzinfo=UTC)

# Tried in order after ISO-8601. Every layout carries a full date; a
# string matching none of them is not a time.
TIME_FORMATS = (
    "%Y.%m.%d",
    "%Y-%m-%d %H:%M:%S %Z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f %z %Z",
    "%Y-%m-%d %H:%M:%S %z %Z",
    "%a %b %d %H:%M:%S %Y",  # ANSIC
    "%a %b %d %H:%M:%S %Z %Y",  # Unix date
    "%a %b %d %H:%M:%S %z %Y",  # Ruby
    "%d %b %y %H:%M %Z",  # RFC 822
    "%d %b %y %H:%M %z",
    "%A, %d-%b-%y %H:%M:%S %Z",  # RFC 850
    "%a, %d %b %Y %H:%M:%S %Z",  # RFC 1123
    "%a, %d %b %Y %H:%M:%S %z",
)

# strptime only knows the UTC and GMT abbreviations; other zone
# abbreviations are read as UTC.
_ZONE_ABBREVIATION = re.compile(r"\b(?!UTC\b|GMT\b)[A-Z]{3,5}\b")
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def to_utc(dt: datetime) -> datetime:
    """Make *dt* aware in UTC; naive values are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_layouts(raw: str) -> datetime | None:
    text = _LONG_FRACTION.sub(r"\1", _ZONE_ABBREVIATION.sub("UTC", raw))
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_time(value: Any) -> datetime | None:
    """Turn a meta value into an aware UTC datetime, or ``None``.

    Accepts datetimes, dates (midnight UTC) and strings. Strings are tried
    as ISO-8601 first (which covers ``20060102`` and RFC 3339), then
    against ``TIME_FORMATS``.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None

    try:
        return to_utc(date_parser.isoparse(raw))
    except (ValueError, OverflowError):
        pass

    parsed = _parse_layouts(raw)
    return to_utc(parsed) if parsed is not None else None
