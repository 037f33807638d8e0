import logging
from datetime import date
from typing import Any, Callable, Optional

from subtrack.config import settings
from subtrack.schemas.analytics import Insight, InsightPriority, InsightType
from subtrack.services.costs import category_sorted, monthly_billed, potential_savings
from subtrack.services.dates import NowLike, TimezoneLike, get_timezone, local_today
from subtrack.services.display import to_fixed
from subtrack.services.renewals import upcoming_renewals

logger = logging.getLogger(__name__)

SAVINGS_THRESHOLD = 10.0  # Currency units per year
CATEGORY_SHARE_THRESHOLD = 40.0  # Percent of total monthly spend
RENEWAL_WINDOW_DAYS = 7
SUBSCRIPTION_COUNT_THRESHOLD = 10


def _plural(count: int, word: str) -> str:
    return f"{word}{'s' if count > 1 else ''}"


def savings_insight(subscriptions: list[Any], today: date, tz) -> Optional[Insight]:
    monthly_subs = monthly_billed(subscriptions)
    if not monthly_subs:
        return None

    savings = potential_savings(subscriptions)
    if savings <= SAVINGS_THRESHOLD:
        return None

    count = len(monthly_subs)
    return Insight(
        type=InsightType.SAVINGS,
        message=(
            f"Switch {count} {_plural(count, 'subscription')} to yearly billing "
            f"and save up to ${to_fixed(savings, 2)}/year"
        ),
        priority=InsightPriority.HIGH,
    )


def spending_insight(subscriptions: list[Any], today: date, tz) -> Optional[Insight]:
    categories = category_sorted(subscriptions)
    if not categories or categories[0].percentage <= CATEGORY_SHARE_THRESHOLD:
        return None

    top = categories[0]
    return Insight(
        type=InsightType.SPENDING,
        message=f"{top.category} accounts for {to_fixed(top.percentage, 0)}% of your spending",
        priority=InsightPriority.MEDIUM,
    )


def renewal_insight(subscriptions: list[Any], today: date, tz) -> Optional[Insight]:
    upcoming = upcoming_renewals(subscriptions, RENEWAL_WINDOW_DAYS, today, tz)
    if not upcoming:
        return None

    count = len(upcoming)
    total_cost = sum((sub.cost for sub, _ in upcoming), 0.0)
    return Insight(
        type=InsightType.RENEWAL,
        message=(
            f"{count} {_plural(count, 'renewal')} coming up this week "
            f"(${to_fixed(total_cost, 2)})"
        ),
        priority=InsightPriority.HIGH,
    )


def count_insight(subscriptions: list[Any], today: date, tz) -> Optional[Insight]:
    count = len(subscriptions)
    if count <= SUBSCRIPTION_COUNT_THRESHOLD:
        return None

    return Insight(
        type=InsightType.COUNT,
        message=f"You have {count} active subscriptions - consider reviewing for unused services",
        priority=InsightPriority.LOW,
    )


INSIGHT_EVALUATORS: list[Callable[[list[Any], date, Any], Optional[Insight]]] = [
    savings_insight,
    spending_insight,
    renewal_insight,
    count_insight,
]


def generate_insights(
    subscriptions: list[Any],
    now: NowLike = None,
    tz: TimezoneLike = None,
    limit: Optional[int] = None,
) -> list[Insight]:
    """Run every evaluator in order and keep the first ``limit`` insights."""
    if limit is None:
        limit = settings.max_insights
    if not subscriptions:
        return []

    tz = get_timezone(tz)
    today = local_today(now, tz)

    insights = []
    for evaluate in INSIGHT_EVALUATORS:
        insight = evaluate(subscriptions, today, tz)
        if insight is not None:
            insights.append(insight)

    logger.debug(f"Generated {len(insights)} insights for {len(subscriptions)} subscriptions")
    return insights[:limit]
