import logging
import math
from datetime import date, datetime, tzinfo
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Query

from subtrack.exceptions import ValidationError
from subtrack.schemas.analytics import (
    DaysUntilResponse,
    Insight,
    RenewalTimeline,
    StatsRequest,
    StatsSummary,
    UpcomingRenewal,
    UpcomingRenewalListResponse,
)
from subtrack.services.dates import get_timezone, local_today
from subtrack.services.display import days_label
from subtrack.services.insights import generate_insights
from subtrack.services.renewals import bucketize, days_until, upcoming_renewals
from subtrack.services.stats import build_stats_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


def _resolve_today(
    now: Optional[Union[datetime, date]], timezone: Optional[str]
) -> tuple[date, tzinfo]:
    """Resolve the request's timezone and calendar day once for the whole request."""
    try:
        tz = get_timezone(timezone)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return local_today(now, tz), tz


def _validate_costs(request: StatsRequest) -> None:
    """Reject NaN or Infinity costs, which have no JSON representation."""
    for sub in request.subscriptions:
        if not math.isfinite(sub.cost):
            raise HTTPException(
                status_code=422,
                detail=f"Subscription {sub.id} has a non-finite cost",
            )


@router.post("", response_model=StatsSummary)
async def get_stats(request: StatsRequest):
    """Totals, categories, renewal timeline and insights for the statistics screen."""
    _validate_costs(request)
    today, tz = _resolve_today(request.now, request.timezone)
    return build_stats_summary(request.subscriptions, today, tz, request.horizon_days)


@router.post("/timeline", response_model=RenewalTimeline)
async def get_renewal_timeline(request: StatsRequest):
    """Upcoming renewals bucketed into this week, next week and this month."""
    _validate_costs(request)
    today, tz = _resolve_today(request.now, request.timezone)
    return bucketize(request.subscriptions, request.horizon_days, today, tz)


@router.post("/insights", response_model=list[Insight])
async def get_insights(request: StatsRequest):
    """Prioritized insights about savings, spending and renewals."""
    _validate_costs(request)
    today, tz = _resolve_today(request.now, request.timezone)
    return generate_insights(request.subscriptions, today, tz)


@router.post("/upcoming", response_model=UpcomingRenewalListResponse)
async def get_upcoming_renewals(
    request: StatsRequest,
    days: int = Query(default=7, ge=1, le=90, description="Days to look ahead"),
):
    """Get subscriptions renewing within the specified number of days."""
    _validate_costs(request)
    today, tz = _resolve_today(request.now, request.timezone)

    upcoming_items = [
        UpcomingRenewal(
            id=sub.id,
            name=sub.name,
            cost=sub.cost,
            renewal_date=sub.renewal_date,
            days_until_renewal=offset,
            label=days_label(offset),
        )
        for sub, offset in upcoming_renewals(request.subscriptions, days, today, tz)
    ]
    logger.info(f"Found {len(upcoming_items)} renewals in the next {days} days")

    return UpcomingRenewalListResponse(
        items=upcoming_items,
        total_count=len(upcoming_items),
        total_cost=sum((item.cost for item in upcoming_items), 0.0),
    )


@router.get("/days-until/{renewal_date}", response_model=DaysUntilResponse)
async def get_days_until(
    renewal_date: str,
    now: Optional[date] = Query(default=None, description="Reference day, YYYY-MM-DD"),
    timezone: Optional[str] = Query(default=None, description="IANA timezone name"),
):
    """Number of calendar days until a renewal date."""
    today, tz = _resolve_today(now, timezone)
    try:
        offset = days_until(renewal_date, today, tz)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return DaysUntilResponse(
        renewal_date=renewal_date,
        days_until_renewal=offset,
        label=days_label(offset),
    )
