"""Tests for day-offset calculations and renewal lookups."""

from datetime import date, datetime, timedelta, timezone

import pytest

from subtrack.exceptions import ValidationError
from subtrack.services.dates import parse_local_date
from subtrack.services.renewals import (
    days_until,
    is_past,
    is_upcoming,
    next_cycle_date,
    next_renewal_date,
    reminder_candidates,
    renewal_offsets,
    upcoming_renewals,
)

TODAY = date(2025, 12, 10)


# =============================================================================
# days_until
# =============================================================================


class TestDaysUntil:
    """Tests for standard day-offset calculations."""

    def test_three_days(self):
        """Should count 3 days from Dec 10 to Dec 13."""
        assert days_until("2025-12-13", TODAY) == 3

    def test_today(self):
        """Should return 0 for today."""
        assert days_until("2025-12-10", TODAY) == 0

    def test_tomorrow(self):
        """Should return 1 for tomorrow."""
        assert days_until("2025-12-11", TODAY) == 1

    def test_past(self):
        """Should return a negative offset for past dates."""
        assert days_until("2025-12-05", TODAY) == -5

    def test_date_value(self):
        """Should accept a date value for the renewal date."""
        assert days_until(date(2025, 12, 13), TODAY) == 3

    @pytest.mark.parametrize(
        "now, renewal, expected",
        [
            (date(2025, 12, 30), "2025-12-31", 1),
            (date(2025, 12, 31), "2026-01-01", 1),
            (date(2025, 11, 30), "2025-12-05", 5),
            (date(2024, 2, 28), "2024-02-29", 1),
            (date(2024, 2, 29), "2024-03-01", 1),
            (date(2025, 2, 28), "2025-03-01", 1),
            (date(2025, 1, 1), "2026-01-01", 365),
            (date(2024, 1, 1), "2025-01-01", 366),
        ],
    )
    def test_month_and_year_boundaries(self, now, renewal, expected):
        """Should count civil days across month, year and leap-day boundaries."""
        assert days_until(renewal, now, "America/Los_Angeles") == expected

    def test_invalid_renewal_date(self):
        """Should raise ValidationError for a malformed renewal date."""
        with pytest.raises(ValidationError):
            days_until("2025-02-30", TODAY)

    def test_deterministic(self):
        """Identical arguments should always give the same offset."""
        results = {days_until("2026-01-09", TODAY, "Europe/London") for _ in range(5)}
        assert results == {30}


class TestDaysUntilTimezones:
    """Tests that offsets follow the observer's calendar, not UTC."""

    @pytest.mark.parametrize(
        "tz_name",
        ["UTC", "America/Los_Angeles", "Pacific/Honolulu", "Asia/Tokyo", "Pacific/Kiritimati"],
    )
    def test_same_offset_everywhere(self, tz_name):
        """A civil date should be the same distance from a civil today in every timezone."""
        assert days_until("2025-12-13", TODAY, tz_name) == 3

    def test_evening_west_of_utc(self):
        """At 7pm in Los Angeles it is still Dec 10 locally, even though UTC says Dec 11."""
        now = datetime(2025, 12, 11, 3, 0, tzinfo=timezone.utc)
        assert days_until("2025-12-13", now, "America/Los_Angeles") == 3
        assert days_until("2025-12-13", now, "UTC") == 2

    def test_today_is_not_yesterday_west_of_utc(self):
        """A renewal due today should never appear as yesterday west of UTC."""
        now = datetime(2025, 12, 13, 7, 59, tzinfo=timezone.utc)  # 23:59 on Dec 12 in LA
        assert days_until("2025-12-12", now, "America/Los_Angeles") == 0


class TestDaysUntilDST:
    """Tests that DST transition days still count as exactly one day."""

    def test_spring_forward_day_is_23_hours(self):
        """The interval between the two local midnights really is 23 hours."""
        start = parse_local_date("2025-03-09", "America/Los_Angeles")
        end = parse_local_date("2025-03-10", "America/Los_Angeles")
        assert end - start == timedelta(hours=23)

    def test_fall_back_day_is_25_hours(self):
        """The interval between the two local midnights really is 25 hours."""
        start = parse_local_date("2025-11-02", "America/Los_Angeles")
        end = parse_local_date("2025-11-03", "America/Los_Angeles")
        assert end - start == timedelta(hours=25)

    def test_spring_forward(self):
        """Should return 1 across the spring-forward transition."""
        assert days_until("2025-03-10", date(2025, 3, 9), "America/Los_Angeles") == 1

    def test_fall_back(self):
        """Should return 1 across the fall-back transition."""
        assert days_until("2025-11-03", date(2025, 11, 2), "America/Los_Angeles") == 1

    @pytest.mark.parametrize(
        "now, renewal",
        [(date(2025, 3, 30), "2025-03-31"), (date(2025, 10, 26), "2025-10-27")],
    )
    def test_london_transitions(self, now, renewal):
        """Should return 1 across both European transitions."""
        assert days_until(renewal, now, "Europe/London") == 1

    def test_span_across_both_transitions(self):
        """A long span covering both shifts should still be an exact day count."""
        assert days_until("2025-12-01", date(2025, 3, 1), "America/New_York") == 275

    def test_monotonic_through_dst(self):
        """Offsets should increase by exactly one per civil day across a whole year."""
        start = date(2025, 1, 1)
        offsets = [
            days_until(start + timedelta(days=n), start, "America/Los_Angeles")
            for n in range(366)
        ]
        assert offsets == list(range(366))


# =============================================================================
# Windows and lookups
# =============================================================================


class TestWindowPolicy:
    """Tests for the shared upcoming/past policy."""

    def test_today_is_upcoming(self):
        """A renewal due today counts as upcoming."""
        assert is_upcoming(0, 7)

    def test_window_is_inclusive(self):
        """The last day of the window counts, the day after does not."""
        assert is_upcoming(7, 7)
        assert not is_upcoming(8, 7)

    def test_past(self):
        """Only negative offsets are past."""
        assert is_past(-1)
        assert not is_past(0)
        assert not is_upcoming(-1, 7)


class TestUpcomingRenewals:
    """Tests for upcoming_renewals."""

    def test_sorted_by_offset(self, make_subscription):
        """Should order upcoming renewals soonest first."""
        later = make_subscription("2025-12-15", name="Later")
        sooner = make_subscription("2025-12-11", name="Sooner")
        today = make_subscription("2025-12-10", name="Today")

        result = upcoming_renewals([later, sooner, today], 7, TODAY)
        assert [(sub.name, offset) for sub, offset in result] == [
            ("Today", 0),
            ("Sooner", 1),
            ("Later", 5),
        ]

    def test_excludes_past_and_far(self, make_subscription):
        """Should drop past renewals and those beyond the window."""
        subs = [
            make_subscription("2025-12-09", name="Past"),
            make_subscription("2025-12-17", name="Edge"),
            make_subscription("2025-12-18", name="Far"),
        ]
        result = upcoming_renewals(subs, 7, TODAY)
        assert [sub.name for sub, _ in result] == ["Edge"]

    def test_ties_keep_input_order(self, make_subscription):
        """Subscriptions renewing the same day should keep their input order."""
        subs = [
            make_subscription("2025-12-12", name="B"),
            make_subscription("2025-12-12", name="A"),
        ]
        assert [sub.name for sub, _ in upcoming_renewals(subs, 7, TODAY)] == ["B", "A"]

    def test_default_window(self, make_subscription):
        """Should default to the configured seven-day window."""
        subs = [make_subscription("2025-12-17"), make_subscription("2025-12-18")]
        assert len(upcoming_renewals(subs, now=TODAY)) == 1

    def test_empty(self):
        """Should return an empty list for no subscriptions."""
        assert upcoming_renewals([], 7, TODAY) == []


class TestNextRenewalDate:
    """Tests for next_renewal_date."""

    def test_soonest_future(self, make_subscription):
        """Should return the soonest renewal that is not past."""
        subs = [
            make_subscription("2026-02-01"),
            make_subscription("2025-12-01"),
            make_subscription("2025-12-20"),
        ]
        assert next_renewal_date(subs, TODAY) == "2025-12-20"

    def test_today_counts(self, make_subscription):
        """A renewal due today is the next renewal."""
        subs = [make_subscription("2025-12-20"), make_subscription("2025-12-10")]
        assert next_renewal_date(subs, TODAY) == "2025-12-10"

    def test_all_past(self, make_subscription):
        """Should return None when every renewal is past."""
        assert next_renewal_date([make_subscription("2025-11-01")], TODAY) is None

    def test_empty(self):
        """Should return None for no subscriptions."""
        assert next_renewal_date([], TODAY) is None


class TestRenewalOffsets:
    """Tests for renewal_offsets."""

    def test_pairs_in_input_order(self, make_subscription):
        """Should pair each subscription with its offset, keeping input order."""
        subs = [make_subscription("2025-12-20"), make_subscription("2025-12-05")]
        assert [offset for _, offset in renewal_offsets(subs, TODAY)] == [10, -5]


class TestReminderCandidates:
    """Tests for reminder_candidates."""

    def test_matches_lead_days(self, make_subscription):
        """Should pick subscriptions renewing exactly lead_days from today."""
        due = make_subscription("2025-12-13", name="Due")
        early = make_subscription("2025-12-12", name="Early")
        late = make_subscription("2025-12-14", name="Late")
        assert reminder_candidates([due, early, late], 3, TODAY) == [due]

    def test_skips_disabled_reminders(self, make_subscription):
        """Should skip subscriptions with reminders turned off."""
        muted = make_subscription("2025-12-13", reminders=False)
        assert reminder_candidates([muted], 3, TODAY) == []


class TestNextCycleDate:
    """Tests for next_cycle_date."""

    @pytest.mark.parametrize(
        "renewal, cycle, expected",
        [
            ("2025-12-13", "monthly", "2026-01-13"),
            ("2025-01-15", "monthly", "2025-02-15"),
            ("2025-01-31", "monthly", "2025-02-28"),
            ("2024-01-31", "monthly", "2024-02-29"),
            ("2025-03-31", "monthly", "2025-04-30"),
            ("2025-12-13", "yearly", "2026-12-13"),
            ("2024-02-29", "yearly", "2025-02-28"),
        ],
    )
    def test_next_cycle(self, renewal, cycle, expected):
        """Should advance one billing cycle, clamping to the end of short months."""
        assert next_cycle_date(renewal, cycle) == expected

    def test_invalid_date(self):
        """Should raise ValidationError for a malformed renewal date."""
        with pytest.raises(ValidationError):
            next_cycle_date("2025-13-01", "monthly")
