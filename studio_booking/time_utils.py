"""Wall-clock and calendar helpers.

Times are studio-local with no timezone attached. The canonical form is
24-hour ``HH:MM``; the legacy ``h:mm AM/PM`` form written by older
admin screens is accepted on input.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from studio_booking.errors import InvalidDateError

DAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")


def parse_time(value: str) -> int:
    """Parse a wall-clock time into minutes since midnight.

    Examples:
        >>> parse_time("14:30")
        870
        >>> parse_time("9:00 AM")
        540
        >>> parse_time("12:15 PM")
        735

    Raises:
        ValueError: If the value is not a recognisable time.
    """
    text = value.strip()

    match = _TIME_24H.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            raise ValueError(f"Invalid time: {value!r}")
        return hours * 60 + minutes

    match = _TIME_12H.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        period = match.group(3).upper()
        if not 1 <= hours <= 12 or minutes > 59:
            raise ValueError(f"Invalid time: {value!r}")
        if period == "PM" and hours != 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0
        return hours * 60 + minutes

    raise ValueError(f"Invalid time: {value!r}")


def format_time(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    if not 0 <= minutes < 24 * 60:
        raise ValueError(f"Minutes out of range for a day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str) -> str:
    """Return the canonical ``HH:MM`` form of any accepted time string."""
    return format_time(parse_time(value))


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        InvalidDateError: If the string is not a valid calendar date.
    """
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError):
        raise InvalidDateError(f"Invalid date (expected YYYY-MM-DD): {value!r}") from None


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def canonical_date(value: str) -> str:
    """Return the zero-padded ``YYYY-MM-DD`` form of a date string.

    Stored dates are matched by string equality, so every date is
    normalised before it is written or used as a lookup key.

    Examples:
        >>> canonical_date("2026-9-7")
        '2026-09-07'
    """
    return format_date(parse_date(value))


def day_index(value: str) -> int:
    """Weekday of a date string, 0=Sunday .. 6=Saturday."""
    # date.weekday() is 0=Monday
    return (parse_date(value).weekday() + 1) % 7


def day_of_week(value: str) -> str:
    """Lowercase weekday name of a date string."""
    return DAY_NAMES[day_index(value)]


def add_days(value: str, days: int) -> str:
    return format_date(parse_date(value) + timedelta(days=days))


def is_weekend(value: str) -> bool:
    return day_index(value) in (0, 6)


def today(now: Optional[datetime] = None) -> str:
    """Today's date in studio-local wall-clock terms."""
    return format_date((now or datetime.now()).date())
