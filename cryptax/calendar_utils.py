"""Calendar arithmetic used by the term rule, amortizer and mining series."""

import calendar
from collections.abc import Iterator
from datetime import date, timedelta


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of the target month."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # Feb 29 -> Feb 28
        return d.replace(year=d.year + years, day=28)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def start_of_next_year(d: date) -> date:
    return date(d.year + 1, 1, 1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
