"""Timestamp helpers for Jira field values."""
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as dtparser


def parse_jira_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a Jira timestamp or date into an aware UTC datetime.

    Jira sends full timestamps as "2026-01-15T10:30:00.000+0000" and due
    dates as "2026-01-15". Date-only values resolve to midnight UTC.

    Args:
        value: Raw field value from the search response.

    Returns:
        Aware datetime in UTC, or None when the value is empty.

    Raises:
        ValueError: If the value is not an ISO 8601 string.
    """
    if not value:
        return None
    try:
        parsed = dtparser.isoparse(value)
    except (TypeError, OverflowError) as e:
        raise ValueError(f"Invalid Jira timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_display_date(value: datetime) -> str:
    """Format a timestamp the way Jira's UI shows short dates (M/D/YYYY)."""
    return f"{value.month}/{value.day}/{value.year}"
