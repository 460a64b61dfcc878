"""Calendar helpers. All ledger timestamps are naive and interpreted as UTC."""
import calendar
from datetime import datetime, timezone
from typing import Iterator, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are taken as UTC already"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_month(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1)


def shift_months(moment: datetime, months: int) -> datetime:
    """Move by whole calendar months, clamping the day (Mar 31 - 1 month = Feb 28/29)"""
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def previous_month_bounds(moment: datetime) -> Tuple[datetime, datetime]:
    """[start, end) of the calendar month before the one containing moment"""
    current = start_of_month(moment)
    return shift_months(current, -1), current


def month_key(moment: datetime) -> Tuple[int, int]:
    return moment.year, moment.month


def iter_months(start: Tuple[int, int], end: Tuple[int, int]) -> Iterator[Tuple[int, int]]:
    """Every (year, month) from start to end inclusive"""
    year, month = start
    while (year, month) <= end:
        yield year, month
        month += 1
        if month > 12:
            year, month = year + 1, 1


MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def short_month_name(month: int) -> str:
    """English abbreviation, independent of the process locale"""
    return MONTH_ABBREVIATIONS[month - 1]


