"""Canonical calendar-day boundaries shared by every checklist component.

A "calendar day" is the half-open interval [midnight, next midnight) in one
fixed time reference (UTC unless a caller passes another tz). Nothing in this
module reads the wall clock except utc_now().
"""

import re
from collections.abc import Iterator
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from checklist.core.config import Constants
from checklist.core.errors import InvalidInputError


_DATE_PARAM_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(UTC)


def to_reference(moment: datetime, tz: tzinfo = UTC) -> datetime:
    """Express a moment in the reference frame; naive datetimes are taken to already be in it."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def start_of_day(moment: datetime | date, tz: tzinfo = UTC) -> datetime:
    """Midnight opening the calendar day that contains ``moment``."""
    if isinstance(moment, datetime):
        day = to_reference(moment, tz).date()
    else:
        day = moment
    return datetime.combine(day, time.min, tzinfo=tz)


def day_window(day: datetime | date, tz: tzinfo = UTC) -> tuple[datetime, datetime]:
    """Half-open [start, end) bounds of a calendar day."""
    start = start_of_day(day, tz)
    return start, start + timedelta(days=1)


def calendar_date(moment: datetime | date, tz: tzinfo = UTC) -> date:
    """The calendar date of a moment in the reference frame."""
    return start_of_day(moment, tz).date()


def parse_date_param(value: str) -> date:
    """Parse a strict YYYY-MM-DD query parameter.

    Raises:
        InvalidInputError: If the value is not a valid calendar date in that format
    """
    if not _DATE_PARAM_PATTERN.match(value):
        raise InvalidInputError(f"Invalid date '{value}'. Expected format YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidInputError(f"Invalid date '{value}': {e}") from e


def parse_scheduled_date(value: str | date | datetime) -> date:
    """Accept a completion's scheduledDate as a date, a datetime, or an ISO string."""
    if isinstance(value, datetime):
        return calendar_date(value)
    if isinstance(value, date):
        return value
    if _DATE_PARAM_PATTERN.match(value):
        return parse_date_param(value)
    try:
        return calendar_date(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError as e:
        raise InvalidInputError(f"Invalid scheduledDate '{value}'") from e


def start_of_week(day: date) -> date:
    """First day (Monday) of the week containing ``day``."""
    return day - timedelta(days=(day.weekday() - Constants.WEEK_START) % 7)


def start_of_month(day: date) -> date:
    """First day of the month containing ``day``."""
    return day.replace(day=1)


def week_window(day: date) -> tuple[date, date]:
    """Half-open [monday, next monday) window of the week containing ``day``."""
    start = start_of_week(day)
    return start, start + timedelta(days=7)


def month_window(day: date) -> tuple[date, date]:
    """Half-open [first, first of next month) window of the month containing ``day``."""
    start = start_of_month(day)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each date in the half-open range [start, end)."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def day_key(day: date, tz: tzinfo = UTC) -> str:
    """Stored form of a completion's scheduled day: its midnight boundary in ISO format."""
    return start_of_day(day, tz).isoformat()
