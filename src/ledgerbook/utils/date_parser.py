"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser


def parse_date(date_str: str, dayfirst: bool = True) -> date:
    """Parse an entry date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - Day-first dates: "15/01/2024", "15-01-2024" (month-first with dayfirst=False)
    - Relative dates: "today", "yesterday", "tomorrow" and their Spanish
      equivalents "hoy", "ayer", "mañana"

    Args:
        date_str: Date string
        dayfirst: Interpret ambiguous numeric dates as day/month/year

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if not date_str:
        raise ValueError("Empty date string")
    today = date.today()

    relative_dates = {
        "today": today,
        "hoy": today,
        "yesterday": today - timedelta(days=1),
        "ayer": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "mañana": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
