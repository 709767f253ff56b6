"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def _period_start(period: str, today: date) -> date | None:
    """Return the first day of a 'this'/'last' period, or None if unknown."""
    starts = {
        "this week": today - timedelta(days=today.weekday()),
        "this month": today.replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last week": today - timedelta(days=today.weekday() + 7),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    return starts.get(period)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Accepts ISO dates ("2024-01-15"), free-form dates understood by
    python-dateutil ("January 15, 2024"), "today", "yesterday", "tomorrow"
    and the first day of "this/last week|month|year".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    relative_days = {"today": 0, "yesterday": -1, "tomorrow": 1}
    if text in relative_days:
        return today + timedelta(days=relative_days[text])

    start = _period_start(text, today)
    if start is not None:
        return start

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get inclusive start and end dates for a reporting period.

    Args:
        period: One of this-week, this-month, this-year, last-week,
            last-month, last-year

    Returns:
        Tuple of (start_date, end_date); "this" periods end today

    Raises:
        ValueError: If period string is not recognized
    """
    key = period.strip().lower().replace("-", " ")
    today = date.today()
    start = _period_start(key, today)
    if start is None:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-week, "
            "this-month, this-year, last-week, last-month, last-year"
        )

    if key.startswith("this "):
        return start, today

    lengths = {
        "last week": relativedelta(weeks=1),
        "last month": relativedelta(months=1),
        "last year": relativedelta(years=1),
    }
    return start, start + lengths[key] - timedelta(days=1)
