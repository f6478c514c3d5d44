from datetime import date, datetime, timedelta
from typing import Optional, Union


def remove_time(value: str, is_iso: bool = True) -> str:
    """
    Strip the time component from a date string.

    Args:
        value: Date string, optionally with a time part
        is_iso: Whether the time is separated by "T" (ISO) or a space

    Returns:
        The date part in YYYY-MM-DD form
    """
    return value.split("T" if is_iso else " ")[0]


def is_overdue(
    due_date: Optional[str], today: Optional[Union[date, datetime]] = None
) -> bool:
    """Check whether a YYYY-MM-DD due date lies before today."""
    if not due_date:
        return False

    if today is None:
        today = date.today()
    elif isinstance(today, datetime):
        today = today.date()

    return remove_time(due_date) < today.isoformat()


def parse_to_int(value) -> Optional[int]:
    """
    Parse a string of digits into an int.

    Decimals, signs and whitespace are rejected.

    Returns:
        The parsed integer, or None when the value is not a plain integer
    """
    if not isinstance(value, str) or not value.isdigit() or not value.isascii():
        return None
    return int(value, 10)


def format_time(dt: datetime) -> str:
    """Format a datetime as "Y-M-D H AM|PM" on a 12 hour clock."""
    hours = dt.hour
    ampm = "PM" if hours >= 12 else "AM"
    hours = hours % 12 or 12
    return f"{dt.year}-{dt.month}-{dt.day} {hours} {ampm}"


def earliest_start_label(hours: int, now: Optional[datetime] = None) -> str:
    """
    Describe when a todo could start at the earliest.

    Args:
        hours: Earliest start offset in hours from now
        now: Reference point (defaults to the current time)

    Returns:
        str: Label like "Earliest: 2025-4-1 9 AM"
    """
    if now is None:
        now = datetime.now()
    if hours:
        now = now + timedelta(hours=hours)
    return f"Earliest: {format_time(now)}"
