"""
Date parser utility for post timestamps.

Upstream networks disagree on timestamp formats (ISO 8601 with "Z",
epoch seconds, Twitter's legacy format, Brazilian day-first dates).
Everything is normalized to timezone-aware UTC datetimes.
"""

import calendar
from datetime import datetime, timezone
from typing import Any, List, Optional

from .constants import TIMESTAMP_FORMATS


def parse_timestamp(value: Any, formats: Optional[List[str]] = None) -> datetime:
    """
    Parse a post timestamp into an aware UTC datetime.

    Accepts datetime objects, epoch seconds (int/float), ISO 8601 strings
    (including a trailing "Z"), and any of the fallback formats. Naive
    values are assumed to be UTC.

    Args:
        value: The timestamp to parse
        formats: Optional list of strptime formats to try after ISO 8601.
                 Defaults to TIMESTAMP_FORMATS from constants.

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If the value cannot be interpreted

    Examples:
        >>> parse_timestamp("2024-09-15T13:00:00Z")
        datetime.datetime(2024, 9, 15, 13, 0, tzinfo=datetime.timezone.utc)

        >>> parse_timestamp(1726405200)
        datetime.datetime(2024, 9, 15, 13, 0, tzinfo=datetime.timezone.utc)
    """
    if value is None:
        raise ValueError("Timestamp cannot be empty")

    if isinstance(value, datetime):
        return to_utc(value)

    # bool is an int subclass; never a timestamp
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"Epoch timestamp out of range: {value}") from e

    if formats is None:
        formats = TIMESTAMP_FORMATS

    text = str(value).strip()
    if not text:
        raise ValueError("Timestamp cannot be empty")

    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return to_utc(datetime.fromisoformat(iso_text))
    except ValueError:
        pass

    for fmt in formats:
        try:
            return to_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    raise ValueError(
        f"Could not parse timestamp '{text}'. "
        f"Tried ISO 8601 and {len(formats)} fallback formats"
    )


def to_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def subtract_months(dt: datetime, months: int) -> datetime:
    """
    Move a datetime back by whole calendar months.

    The day is clamped to the target month's length, so March 31 minus
    one month is the last day of February.

    Args:
        dt: Reference datetime
        months: Number of months to go back (non-negative)

    Returns:
        Datetime `months` calendar months before dt, same time of day
    """
    month_index = dt.year * 12 + (dt.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def window_start(now: datetime, months: int) -> datetime:
    """Start of a trailing window of `months` months ending at now."""
    return subtract_months(to_utc(now), months)


def hour_bucket(dt: datetime) -> str:
    """Hour-of-day bucket label, e.g. "09:00"."""
    return f"{dt.hour:02d}:00"

