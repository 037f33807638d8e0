import logging
from calendar import monthrange
from datetime import date
from typing import Any, Optional

from subtrack.config import settings
from subtrack.schemas.analytics import RenewalTimeline
from subtrack.schemas.subscription import BillingCycle
from subtrack.services.dates import (
    DateLike,
    NowLike,
    TimezoneLike,
    get_timezone,
    local_midnight,
    local_today,
    parse_civil_date,
    parse_local_date,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

# A renewal due today counts as upcoming everywhere offsets are windowed.
TODAY_IS_UPCOMING = True
FIRST_UPCOMING_DAY = 0 if TODAY_IS_UPCOMING else 1

THIS_WEEK_LAST_DAY = 7
NEXT_WEEK_LAST_DAY = 14


def days_until(renewal_date: DateLike, now: NowLike = None, tz: TimezoneLike = None) -> int:
    """Signed number of civil days from today to ``renewal_date``."""
    tz = get_timezone(tz)
    today = local_midnight(local_today(now, tz), tz)
    renewal = parse_local_date(renewal_date, tz)
    # Round rather than ceil: a DST day is 23 or 25 wall-clock hours long
    return round((renewal - today).total_seconds() / SECONDS_PER_DAY)


def is_upcoming(offset: int, window_days: int) -> bool:
    return FIRST_UPCOMING_DAY <= offset <= window_days


def is_past(offset: int) -> bool:
    return offset < 0


def renewal_offsets(
    subscriptions: list[Any], now: NowLike = None, tz: TimezoneLike = None
) -> list[tuple[Any, int]]:
    """Pair every subscription with its day-offset, computed once against one today."""
    tz = get_timezone(tz)
    today = local_today(now, tz)
    return [(sub, days_until(sub.renewal_date, today, tz)) for sub in subscriptions]


def upcoming_renewals(
    subscriptions: list[Any],
    days: Optional[int] = None,
    now: NowLike = None,
    tz: TimezoneLike = None,
) -> list[tuple[Any, int]]:
    """Subscriptions renewing within ``days`` with their offsets, soonest first."""
    if days is None:
        days = settings.upcoming_window_days

    upcoming = [
        (sub, offset)
        for sub, offset in renewal_offsets(subscriptions, now, tz)
        if is_upcoming(offset, days)
    ]
    # sorted() is stable, so ties keep their input order
    return sorted(upcoming, key=lambda pair: pair[1])


def next_renewal_date(
    subscriptions: list[Any], now: NowLike = None, tz: TimezoneLike = None
) -> Optional[str]:
    """Renewal date of the soonest subscription that is not already past."""
    candidates = [
        (sub, offset)
        for sub, offset in renewal_offsets(subscriptions, now, tz)
        if not is_past(offset)
    ]
    if not candidates:
        return None
    soonest, _ = min(candidates, key=lambda pair: pair[1])
    return soonest.renewal_date


def bucketize(
    subscriptions: list[Any],
    horizon_days: Optional[int] = None,
    now: NowLike = None,
    tz: TimezoneLike = None,
) -> RenewalTimeline:
    """Partition upcoming renewals into this week, next week and this month.

    The offset computed for each subscription decides both whether it falls
    inside the horizon and which bucket it lands in, so the two can never
    disagree about which side of midnight a renewal is on. Input order is
    preserved inside each bucket.
    """
    if horizon_days is None:
        horizon_days = settings.timeline_horizon_days

    timeline = RenewalTimeline()
    for sub, offset in renewal_offsets(subscriptions, now, tz):
        if not is_upcoming(offset, horizon_days):
            continue
        if offset <= THIS_WEEK_LAST_DAY:
            timeline.this_week.append(sub)
        elif offset <= NEXT_WEEK_LAST_DAY:
            timeline.next_week.append(sub)
        else:
            timeline.this_month.append(sub)

    logger.debug(
        f"Bucketized {len(subscriptions)} subscriptions over {horizon_days} days: "
        f"{len(timeline.this_week)} this week, {len(timeline.next_week)} next week, "
        f"{len(timeline.this_month)} this month"
    )
    return timeline


def reminder_candidates(
    subscriptions: list[Any],
    lead_days: int,
    now: NowLike = None,
    tz: TimezoneLike = None,
) -> list[Any]:
    """Subscriptions with reminders enabled that renew exactly ``lead_days`` from today."""
    return [
        sub
        for sub, offset in renewal_offsets(subscriptions, now, tz)
        if sub.reminders and offset == lead_days
    ]


def next_cycle_date(renewal_date: DateLike, billing_cycle: str) -> str:
    """Civil date one billing cycle after ``renewal_date``.

    Days past the end of the target month are clamped to its last day, so
    Jan 31 renews on Feb 28 (or 29) and Feb 29 renews on Feb 28 next year.
    """
    current = parse_civil_date(renewal_date)
    months = 1 if billing_cycle == BillingCycle.MONTHLY else 12

    month_index = current.month - 1 + months
    year = current.year + month_index // 12
    month = month_index % 12 + 1
    _, last_day = monthrange(year, month)
    return date(year, month, min(current.day, last_day)).isoformat()
