from datetime import date

import pytest
from fastapi.testclient import TestClient

from subtrack.main import app
from subtrack.schemas.subscription import Subscription


@pytest.fixture
def client():
    """Create a test client for the analytics API."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_subscription():
    """Factory for subscription records with sensible defaults."""
    counter = {"next_id": 1}

    def _make(
        renewal_date: str | date = "2025-12-13",
        name: str | None = None,
        cost: float = 9.99,
        billing_cycle: str = "monthly",
        category: str = "Entertainment",
        reminders: bool = True,
    ) -> Subscription:
        sub_id = str(counter["next_id"])
        counter["next_id"] += 1
        return Subscription(
            id=sub_id,
            name=name or f"Sub {sub_id}",
            cost=cost,
            billing_cycle=billing_cycle,
            renewal_date=renewal_date,
            category=category,
            reminders=reminders,
        )

    return _make
