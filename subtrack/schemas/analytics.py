from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from subtrack.schemas.subscription import Subscription


class InsightType(str, Enum):
    SAVINGS = "savings"
    SPENDING = "spending"
    RENEWAL = "renewal"
    COUNT = "count"


class InsightPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Insight(BaseModel):
    """A prioritized, human-readable observation about the subscriptions."""

    type: InsightType
    message: str
    priority: InsightPriority


class CategoryCost(BaseModel):
    """Monthly cost of a single category."""

    category: str
    total: float  # Monthly-normalized
    percentage: float  # Share of the grand monthly total, 0 when the total is 0


class BillingCycleDistribution(BaseModel):
    monthly: int = 0
    yearly: int = 0


class RenewalTimeline(BaseModel):
    """Upcoming renewals split into non-overlapping day-offset windows."""

    this_week: list[Subscription] = Field(default_factory=list)  # days 0-7
    next_week: list[Subscription] = Field(default_factory=list)  # days 8-14
    this_month: list[Subscription] = Field(default_factory=list)  # days 15-horizon


# Upcoming renewals schemas
class UpcomingRenewal(BaseModel):
    id: str
    name: str
    cost: float
    renewal_date: str
    days_until_renewal: int
    label: str  # "Today", "Tomorrow", "3 days"


class UpcomingRenewalListResponse(BaseModel):
    items: list[UpcomingRenewal]
    total_count: int
    total_cost: float


class DaysUntilResponse(BaseModel):
    renewal_date: str
    days_until_renewal: int
    label: str


# Statistics screen schemas
class StatsRequest(BaseModel):
    """Subscriptions plus the reference moment for a single render pass."""

    subscriptions: list[Subscription] = Field(default_factory=list)
    now: Optional[Union[datetime, date]] = None  # Defaults to the server clock
    timezone: Optional[str] = None  # IANA name, defaults to settings.default_timezone
    horizon_days: Optional[int] = Field(None, ge=0, le=366)


class StatsSummary(BaseModel):
    """Everything the statistics screen renders, computed against one 'today'."""

    today: date
    subscription_count: int
    total_monthly_cost: float
    total_yearly_cost: float
    average_monthly_cost: float
    potential_savings: float  # Per year, switching monthly plans to yearly
    billing_cycle_distribution: BillingCycleDistribution
    next_renewal_date: Optional[str]
    next_renewal_label: str
    categories: list[CategoryCost]
    timeline: RenewalTimeline
    insights: list[Insight]
