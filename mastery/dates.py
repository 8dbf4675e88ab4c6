from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta


def as_date(value) -> date:
    """Accept a ``date``, ``datetime`` or ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def iter_days(start, count: int) -> list[date]:
    start_day = as_date(start)
    return [start_day + timedelta(days=offset) for offset in range(count)]


def trailing_days(end, count: int) -> list[date]:
    """``count`` days ending at ``end`` (inclusive), oldest first."""
    end_day = as_date(end)
    return iter_days(end_day - timedelta(days=count - 1), count)


def month_days(year: int, month: int) -> list[date]:
    days_in_month = calendar.monthrange(year, month)[1]
    return iter_days(date(year, month, 1), days_in_month)


def week_start_for(day, first_weekday: int = 0) -> date:
    current = as_date(day)
    return current - timedelta(days=(current.weekday() - first_weekday) % 7)
