from datetime import datetime, timezone, date
from typing import Optional, Union


def utcnow() -> datetime:
    """Server-side 'now' in UTC, naive, matching how timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[Union[str, datetime, date]]) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime and normalize to a UTC-naive datetime.

    - None / "" -> None
    - "YYYY-MM-DD" becomes midnight UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)

    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def financial_year(when: Union[date, datetime]) -> int:
    """Financial years run July to June and are named by the year they end in."""
    return when.year + 1 if when.month >= 7 else when.year


def financial_year_month(calendar_month: int) -> int:
    """Map a calendar month onto the financial year: July is 1, June is 12."""
    return calendar_month - 6 if calendar_month >= 7 else calendar_month + 6


def financial_year_bounds(fy: int):
    """Return the half-open [start, end) datetimes of financial year ``fy``."""
    return datetime(fy - 1, 7, 1), datetime(fy, 7, 1)
