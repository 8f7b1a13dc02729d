"""Date parsing utilities."""

from datetime import date, datetime, timedelta, UTC
from typing import Any, Optional

from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Current instant in UTC."""
    return datetime.now(UTC)


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string
        today: Reference day for relative words (defaults to the UTC date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = utc_now().date()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def to_date(value: Any) -> date:
    """Convert a stored or supplied date value to a date.

    Stored entries carry ISO strings ("2024-01-01"), occasionally with a time
    component; date and datetime objects are accepted as well.

    Raises:
        ValueError: If the value is not a recognisable date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date_parser.isoparse(value.strip()).date()
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Could not parse date '{value}': {e}")
    raise ValueError(f"Could not parse date {value!r}")


def start_of_day(day: date) -> datetime:
    """Midnight UTC of the given day."""
    return datetime(day.year, day.month, day.day, tzinfo=UTC)
