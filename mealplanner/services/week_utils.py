from datetime import date, datetime, timedelta
from typing import Optional, Union


def format_date(d: Union[date, datetime]) -> str:
    if isinstance(d, datetime):
        d = d.date()
    return d.isoformat()


def week_start(d: Optional[Union[date, datetime]] = None) -> date:
    """
    Monday of the week containing `d` (today when omitted).
    """
    if d is None:
        d = date.today()
    if isinstance(d, datetime):
        d = d.date()
    # monday = 0, sunday = 6
    return d - timedelta(days=d.weekday())


def next_week_start(d: Optional[Union[date, datetime]] = None) -> date:
    return week_start(d) + timedelta(days=7)


def parse_week_start(value: str) -> str:
    """
    Normalise an ISO date string to the Monday of its week (YYYY-MM-DD).
    Raises ValueError on anything that is not an ISO date.
    """
    parsed = date.fromisoformat(value.strip()[:10])
    return format_date(week_start(parsed))
