from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

from subtrack.services.dates import format_local_date, parse_civil_date


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Subscription(BaseModel):
    id: str
    name: str
    cost: float  # Per billing cycle
    billing_cycle: BillingCycle
    renewal_date: str  # Civil date, YYYY-MM-DD
    category: str
    domain: Optional[str] = None
    description: Optional[str] = None
    reminders: bool = True
    is_custom_renewal_date: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("renewal_date", mode="before")
    @classmethod
    def validate_renewal_date(cls, v):
        # Accepts a date value too, but always stores the bare civil-date string
        return format_local_date(parse_civil_date(v))

    class Config:
        from_attributes = True
