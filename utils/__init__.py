"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, today_in, parse_date, format_date, same_month
from utils.logs import configure_logging
