import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Optional, Union

from subtrack.services.dates import NowLike, TimezoneLike, parse_civil_date
from subtrack.services.renewals import days_until

SOON_DAYS = 3
LABEL_DAYS = 7


def _as_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return parse_civil_date(value)


def format_date(value: Union[str, date]) -> str:
    """'Dec 13, 2025'"""
    return f"{_as_date(value):%b %d, %Y}"


def format_short_date(value: Union[str, date]) -> str:
    """'Dec 13'"""
    return f"{_as_date(value):%b %d}"


def format_full_date(value: Union[str, date]) -> str:
    """'December 13, 2025'"""
    day = _as_date(value)
    return f"{day:%B} {day.day}, {day.year}"


def to_fixed(value: float, places: int) -> str:
    """Fixed-point text with exact halves rounded up (2.5 -> "3", 10.125 -> "10.13")."""
    if not math.isfinite(value):
        return f"{value:.{places}f}"
    # Decimal(value) is the exact binary value, so only true ties round up
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=Context(prec=400))
    return str(rounded)


def days_label(offset: int) -> str:
    if offset == 0:
        return "Today"
    if offset == 1:
        return "Tomorrow"
    return f"{offset} days"


def urgency(offset: int) -> str:
    """Urgency bucket a renewal row is highlighted with: due, soon or normal."""
    if offset == 0:
        return "due"
    if offset <= SOON_DAYS:
        return "soon"
    return "normal"


def next_renewal_label(
    renewal_date: Optional[str], now: NowLike = None, tz: TimezoneLike = None
) -> str:
    """Relative label within a week, otherwise the short calendar date ('Dec 3')."""
    if renewal_date is None:
        return "None"

    offset = days_until(renewal_date, now, tz)
    if offset <= LABEL_DAYS:
        return days_label(offset)

    day = parse_civil_date(renewal_date)
    return f"{day:%b} {day.day}"
