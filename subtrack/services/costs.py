import logging
from collections import defaultdict
from typing import Any

from subtrack.schemas.analytics import BillingCycleDistribution, CategoryCost
from subtrack.schemas.subscription import BillingCycle

logger = logging.getLogger(__name__)

YEARLY_BILLING_DISCOUNT = 0.15  # Assumed discount for switching a monthly plan to yearly


def monthly_cost(subscription: Any) -> float:
    """Convert cost to monthly equivalent based on billing cycle."""
    if subscription.billing_cycle == BillingCycle.MONTHLY:
        return subscription.cost
    return subscription.cost / 12


def yearly_cost(subscription: Any) -> float:
    """Convert cost to yearly equivalent based on billing cycle."""
    if subscription.billing_cycle == BillingCycle.MONTHLY:
        return subscription.cost * 12
    return subscription.cost


def total_monthly_cost(subscriptions: list[Any]) -> float:
    return sum((monthly_cost(sub) for sub in subscriptions), 0.0)


def total_yearly_cost(subscriptions: list[Any]) -> float:
    return sum((yearly_cost(sub) for sub in subscriptions), 0.0)


def average_monthly_cost(subscriptions: list[Any]) -> float:
    if not subscriptions:
        return 0.0
    return total_monthly_cost(subscriptions) / len(subscriptions)


def category_breakdown(subscriptions: list[Any]) -> dict[str, float]:
    """Monthly cost per category, in order of first appearance."""
    breakdown: dict[str, float] = defaultdict(float)
    for sub in subscriptions:
        breakdown[sub.category] += monthly_cost(sub)
    return dict(breakdown)


def category_sorted(subscriptions: list[Any]) -> list[CategoryCost]:
    """Categories with their share of the monthly total, most expensive first."""
    grand_total = total_monthly_cost(subscriptions)
    categories = [
        CategoryCost(
            category=category,
            total=total,
            percentage=total / grand_total * 100 if grand_total > 0 else 0.0,
        )
        for category, total in category_breakdown(subscriptions).items()
    ]
    return sorted(categories, key=lambda c: c.total, reverse=True)


def billing_cycle_distribution(subscriptions: list[Any]) -> BillingCycleDistribution:
    distribution = BillingCycleDistribution()
    for sub in subscriptions:
        if sub.billing_cycle == BillingCycle.MONTHLY:
            distribution.monthly += 1
        else:
            distribution.yearly += 1
    return distribution


def monthly_billed(subscriptions: list[Any]) -> list[Any]:
    return [sub for sub in subscriptions if sub.billing_cycle == BillingCycle.MONTHLY]


def potential_savings(subscriptions: list[Any]) -> float:
    """Yearly amount saved by moving every monthly plan to yearly billing."""
    current_yearly = total_yearly_cost(monthly_billed(subscriptions))
    discounted_yearly = current_yearly * (1 - YEARLY_BILLING_DISCOUNT)
    savings = current_yearly - discounted_yearly
    logger.debug(f"Potential yearly savings {savings} on {current_yearly} of monthly plans")
    return savings
