"""UTC-everywhere time handling, plus calendar-date helpers for invoices.

Invoices only care about calendar days. "Today" is always resolved once at
the edge (via `today_in`) and passed down explicitly.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def today_in(tz_name: str = "UTC") -> date:
    """
    Current calendar date in the given timezone.

    Raises:
        ValueError: If timezone name is invalid
    """
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {tz_name}")

    return now_utc().astimezone(tz).date()


def parse_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD string.

    Raises ValueError for anything else (including full datetimes).
    """
    if not isinstance(value, str) or len(value) != 10:
        raise ValueError(f"Invalid date '{value}': expected YYYY-MM-DD")
    return date.fromisoformat(value)


def format_date(value: date | None) -> str | None:
    """Render a date as YYYY-MM-DD (None passes through)."""
    if value is None:
        return None
    return value.isoformat()


def same_month(a: date, b: date) -> bool:
    """Whether two dates fall in the same calendar month of the same year."""
    return a.year == b.year and a.month == b.month
