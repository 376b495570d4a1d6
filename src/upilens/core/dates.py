#!/usr/bin/env python3
"""
Timestamp Parsing for Export Data

UPI exports encode time in several ways: locale strings ("9 Mar 2024, 18:51",
"Mar 9, 2024, 6:51:23 PM IST"), day/month/year with a separate time column,
ISO-8601 with or without offset, and epoch milliseconds.

Every parser returns a naive datetime in Indian Standard Time wall clock so
that records from different sources sort together without mixing naive and
aware values.
"""

import re
from datetime import datetime, timedelta, timezone

IST = timezone(timedelta(hours=5, minutes=30), name="IST")

_LOCALE_FORMATS = [
    "%d %b %Y, %H:%M:%S",
    "%d %b %Y, %H:%M",
    "%d %b %Y %H:%M",
    "%b %d, %Y, %I:%M:%S %p",
    "%b %d, %Y, %I:%M %p",
    "%b %d, %Y, %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d-%m-%Y %H:%M:%S",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d %b %Y",
    "%b %d, %Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
]

_UTC_SUFFIX = re.compile(r"\s+(UTC|GMT)$", re.IGNORECASE)
_IST_SUFFIX = re.compile(r"\s+(IST|GMT\+0?5:30)$", re.IGNORECASE)
_EPOCH_MILLIS = re.compile(r"^\d{12,14}$")
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def to_ist_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive IST; naive values are returned unchanged."""
    if value.tzinfo is None:
        return value
    return value.astimezone(IST).replace(tzinfo=None)


def from_epoch_millis(millis: int | str) -> datetime:
    """Create an IST timestamp from Unix epoch milliseconds."""
    return to_ist_naive(datetime.fromtimestamp(int(millis) / 1000, tz=timezone.utc))


def parse_iso_timestamp(text: str) -> datetime:
    """
    Parse ISO-8601, accepting a trailing 'Z'.

    Raises:
        ValueError: If the text is not ISO-8601
    """
    clean = text.strip()
    if clean.endswith("Z"):
        clean = clean[:-1] + "+00:00"
    return to_ist_naive(datetime.fromisoformat(clean))


def parse_day_month_year(date_str: str, time_str: str = "") -> datetime:
    """
    Parse a DD/MM/YYYY date with an optional separate HH:MM[:SS] time.

    Args:
        date_str: Date like "15/03/2024" or "15-03-2024"
        time_str: Time like "18:51:23", "18:51" or empty

    Returns:
        Naive IST datetime

    Raises:
        ValueError: If either component is malformed
    """
    parts = re.split(r"[/-]", date_str.strip())
    if len(parts) != 3:
        raise ValueError(f"Unparseable date: {date_str!r}")
    day, month, year = (int(p) for p in parts)

    hours = minutes = seconds = 0
    if time_str and time_str.strip():
        time_parts = time_str.strip().split(":")
        if len(time_parts) not in (2, 3):
            raise ValueError(f"Unparseable time: {time_str!r}")
        hours, minutes = int(time_parts[0]), int(time_parts[1])
        seconds = int(time_parts[2]) if len(time_parts) == 3 else 0

    return datetime(year, month, day, hours, minutes, seconds)


def parse_timestamp(text: str) -> datetime:
    """
    Parse any timestamp representation found in supported exports.

    Args:
        text: Timestamp text

    Returns:
        Naive IST datetime

    Raises:
        ValueError: If no known representation matches
    """
    if text is None:
        raise ValueError("Timestamp is required but was None")

    clean = str(text).replace("\u202f", " ").replace("\xa0", " ").strip()
    if not clean:
        raise ValueError("Timestamp is empty")

    if _EPOCH_MILLIS.match(clean):
        return from_epoch_millis(clean)

    if _ISO_PREFIX.match(clean):
        try:
            return parse_iso_timestamp(clean)
        except ValueError:
            pass

    is_utc = False
    if _UTC_SUFFIX.search(clean):
        clean = _UTC_SUFFIX.sub("", clean)
        is_utc = True
    else:
        clean = _IST_SUFFIX.sub("", clean)

    for fmt in _LOCALE_FORMATS:
        try:
            parsed = datetime.strptime(clean, fmt)
        except ValueError:
            continue
        if is_utc:
            return to_ist_naive(parsed.replace(tzinfo=timezone.utc))
        return parsed

    raise ValueError(f"Unparseable timestamp: {text!r}")
