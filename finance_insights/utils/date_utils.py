"""Calendar-month arithmetic helpers"""

from datetime import date, datetime, timezone
from typing import List, Union


def month_start(value: Union[date, datetime]) -> date:
    """First day of the calendar month containing value"""
    return date(value.year, value.month, 1)


def add_months(month: date, months: int) -> date:
    """Shift a month-start date by a (possibly negative) number of months"""
    index = month.year * 12 + (month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def generate_month_range(start: date, end: date) -> List[date]:
    """Generate month-start dates from start to end (inclusive)"""
    first = month_start(start)
    last = month_start(end)
    count = (last.year - first.year) * 12 + (last.month - first.month) + 1
    return [add_months(first, i) for i in range(max(count, 0))]


def month_label(month: date) -> str:
    """Short month name used as the display key, e.g. 'Mar'"""
    return month.strftime("%b")


def to_utc(value: datetime) -> datetime:
    """Convert an aware datetime to UTC; naive datetimes are returned as-is"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)
