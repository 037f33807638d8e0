from subtrack.schemas.analytics import (
    BillingCycleDistribution,
    CategoryCost,
    Insight,
    InsightPriority,
    InsightType,
    RenewalTimeline,
    StatsRequest,
    StatsSummary,
)
from subtrack.schemas.subscription import BillingCycle, Subscription

__all__ = [
    "BillingCycle",
    "Subscription",
    "BillingCycleDistribution",
    "CategoryCost",
    "Insight",
    "InsightPriority",
    "InsightType",
    "RenewalTimeline",
    "StatsRequest",
    "StatsSummary",
]
