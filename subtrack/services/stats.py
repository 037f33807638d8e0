import logging
from typing import Any, Optional

from subtrack.schemas.analytics import StatsSummary
from subtrack.services import costs
from subtrack.services.dates import NowLike, TimezoneLike, get_timezone, local_today
from subtrack.services.display import next_renewal_label
from subtrack.services.insights import generate_insights
from subtrack.services.renewals import bucketize, next_renewal_date

logger = logging.getLogger(__name__)


def build_stats_summary(
    subscriptions: list[Any],
    now: NowLike = None,
    tz: TimezoneLike = None,
    horizon_days: Optional[int] = None,
) -> StatsSummary:
    """Compute the whole statistics screen for one render pass.

    "Now" is resolved to a calendar day once here and that same day is handed
    to every calculation, so the timeline, next renewal and insights agree.
    """
    tz = get_timezone(tz)
    today = local_today(now, tz)

    next_renewal = next_renewal_date(subscriptions, today, tz)
    summary = StatsSummary(
        today=today,
        subscription_count=len(subscriptions),
        total_monthly_cost=costs.total_monthly_cost(subscriptions),
        total_yearly_cost=costs.total_yearly_cost(subscriptions),
        average_monthly_cost=costs.average_monthly_cost(subscriptions),
        potential_savings=costs.potential_savings(subscriptions),
        billing_cycle_distribution=costs.billing_cycle_distribution(subscriptions),
        next_renewal_date=next_renewal,
        next_renewal_label=next_renewal_label(next_renewal, today, tz),
        categories=costs.category_sorted(subscriptions),
        timeline=bucketize(subscriptions, horizon_days, today, tz),
        insights=generate_insights(subscriptions, today, tz),
    )

    logger.info(f"Built stats summary for {len(subscriptions)} subscriptions as of {today}")
    return summary
