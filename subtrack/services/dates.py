import logging
import re
from datetime import date, datetime, tzinfo
from typing import Optional, Union

import pytz

from subtrack.config import settings
from subtrack.exceptions import ValidationError

logger = logging.getLogger(__name__)

CIVIL_DATE_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")

DateLike = Union[str, date]
NowLike = Optional[Union[datetime, date]]
TimezoneLike = Optional[Union[str, tzinfo]]


def get_timezone(tz: TimezoneLike = None) -> tzinfo:
    """Resolve a timezone name or tzinfo, falling back to the configured default."""
    if tz is None:
        tz = settings.default_timezone
    if isinstance(tz, str):
        try:
            return pytz.timezone(tz)
        except pytz.UnknownTimeZoneError:
            raise ValidationError(f"Unknown timezone: {tz}")
    return tz


def parse_civil_date(value: DateLike) -> date:
    """Validate a YYYY-MM-DD string (or date) and return the calendar day it names."""
    if isinstance(value, datetime):
        raise ValidationError(
            f"Expected a calendar date without a time of day, got {value.isoformat()}"
        )
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Expected a YYYY-MM-DD string, got {type(value).__name__}")

    match = CIVIL_DATE_PATTERN.fullmatch(value)
    if not match:
        raise ValidationError(f"Invalid date format: {value!r}. Use YYYY-MM-DD format.")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise ValidationError(f"Invalid calendar date: {value!r}")


def local_midnight(day: date, tz: tzinfo) -> datetime:
    """Return 00:00 of ``day`` in ``tz`` with the UTC offset in effect that day."""
    naive = datetime(day.year, day.month, day.day)
    if hasattr(tz, "localize"):
        # pytz zones pick the DST offset only through localize()
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def parse_local_date(value: DateLike, tz: TimezoneLike = None) -> datetime:
    """Parse a civil date into local midnight of that day in ``tz``.

    The string is never read as a UTC instant, so ``format_local_date`` of
    the result gives back the original string in every timezone.
    """
    return local_midnight(parse_civil_date(value), get_timezone(tz))


def format_local_date(value: date) -> str:
    """Format a date, or a datetime in its own calendar, as YYYY-MM-DD."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def local_today(now: NowLike = None, tz: TimezoneLike = None) -> date:
    """Return the observer's calendar day for ``now``.

    Aware datetimes are converted into ``tz`` first, naive ones are read as
    wall-clock time in ``tz``, and plain dates are taken as they are. The
    system clock is read only when ``now`` is omitted.
    """
    tz = get_timezone(tz)
    if now is None:
        now = datetime.now(tz)
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone(tz)
        return now.date()
    return now
