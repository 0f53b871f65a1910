"""
Tests for Schedule Expander Tool
Tests expansion of recurrence rules into dose instances and the upcoming view
"""

import pytest
from datetime import datetime, date, time, timedelta

from tools.schedule_expander import ScheduleExpander, DoseInstance, date_range
from tools.recurrence import weekday_number


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def expander():
    """Create schedule expander instance"""
    return ScheduleExpander()


@pytest.fixture
def weekday_schedule():
    """Monday-Friday 08:00 schedule"""
    return {
        "id": 1,
        "medication_id": 10,
        "time": "08:00",
        "days_of_week": [1, 2, 3, 4, 5],
        "specific_days": [],
        "as_needed": False,
        "quantity": "1 tablet",
    }


@pytest.fixture
def june_week():
    """Sunday 2024-06-02 through Saturday 2024-06-08"""
    return date_range(date(2024, 6, 2), date(2024, 6, 8))


# =============================================================================
# Expansion Tests
# =============================================================================

class TestExpand:
    """Tests for expanding a single schedule"""

    @pytest.mark.unit
    def test_weekdays_yield_five_instances_per_week(self, expander, weekday_schedule, june_week):
        """A weekday schedule produces one dose per weekday and none at the weekend"""
        instances = expander.expand(weekday_schedule, june_week)

        assert len(instances) == 5
        assert all(weekday_number(i.date) not in (0, 6) for i in instances)
        assert all(i.time == time(8, 0) for i in instances)
        assert all(i.quantity == "1 tablet" for i in instances)

    @pytest.mark.unit
    def test_specific_days_override_days_of_week(self, expander, weekday_schedule):
        """Specific days replace the weekly rule entirely"""
        weekday_schedule["specific_days"] = ["2024-06-01", "2024-06-03"]

        assert expander.expand(weekday_schedule, [date(2024, 6, 2)]) == []
        # 2024-06-04 is a Tuesday, listed in days_of_week but not in specific_days
        assert expander.expand(weekday_schedule, [date(2024, 6, 4)]) == []

        instances = expander.expand(weekday_schedule, [date(2024, 6, 1), date(2024, 6, 3)])
        assert [i.date for i in instances] == [date(2024, 6, 1), date(2024, 6, 3)]

    @pytest.mark.unit
    def test_tapering_window_overrides_quantity(self, expander, weekday_schedule):
        """Doses inside a tapering window use the window's quantity"""
        weekday_schedule.update({
            "days_of_week": [0, 1, 2, 3, 4, 5, 6],
            "quantity": "2 tablets",
            "is_tapering": True,
            "tapering_schedule": [
                {"startDate": "2024-06-01", "endDate": "2024-06-07", "quantity": "1 tablet"}
            ],
        })

        inside = expander.expand(weekday_schedule, [date(2024, 6, 4)])
        outside = expander.expand(weekday_schedule, [date(2024, 6, 10)])

        assert inside[0].quantity == "1 tablet"
        assert outside[0].quantity == "2 tablets"

    @pytest.mark.unit
    def test_tapering_window_bounds_are_inclusive(self, expander, weekday_schedule):
        """Start and end dates both belong to the window"""
        weekday_schedule.update({
            "days_of_week": [0, 1, 2, 3, 4, 5, 6],
            "quantity": "2 tablets",
            "is_tapering": True,
            "tapering_schedule": [
                {"startDate": "2024-06-01", "endDate": "2024-06-07", "quantity": "1 tablet"}
            ],
        })

        instances = expander.expand(weekday_schedule, [date(2024, 6, 1), date(2024, 6, 7), date(2024, 6, 8)])

        assert [i.quantity for i in instances] == ["1 tablet", "1 tablet", "2 tablets"]

    @pytest.mark.unit
    def test_overlapping_tapering_windows_first_match_wins(self, expander, weekday_schedule):
        """The first listed window containing the date decides the quantity"""
        weekday_schedule.update({
            "days_of_week": [0, 1, 2, 3, 4, 5, 6],
            "is_tapering": True,
            "tapering_schedule": [
                {"startDate": "2024-06-01", "endDate": "2024-06-10", "quantity": "3 tablets"},
                {"startDate": "2024-06-05", "endDate": "2024-06-06", "quantity": "1/2 tablet"},
            ],
        })

        assert expander.expand(weekday_schedule, [date(2024, 6, 5)])[0].quantity == "3 tablets"

    @pytest.mark.unit
    def test_inverted_tapering_window_never_matches(self, expander, weekday_schedule):
        """A window ending before it starts is ignored"""
        weekday_schedule.update({
            "days_of_week": [0, 1, 2, 3, 4, 5, 6],
            "quantity": "2 tablets",
            "is_tapering": True,
            "tapering_schedule": [
                {"startDate": "2024-06-07", "endDate": "2024-06-01", "quantity": "1 tablet"}
            ],
        })

        assert expander.expand(weekday_schedule, [date(2024, 6, 4)])[0].quantity == "2 tablets"

    @pytest.mark.unit
    def test_tapering_ignored_when_flag_off(self, expander, weekday_schedule):
        """Tapering windows apply only to tapering schedules"""
        weekday_schedule.update({
            "days_of_week": [0, 1, 2, 3, 4, 5, 6],
            "quantity": "2 tablets",
            "is_tapering": False,
            "tapering_schedule": [
                {"startDate": "2024-06-01", "endDate": "2024-06-07", "quantity": "1 tablet"}
            ],
        })

        assert expander.expand(weekday_schedule, [date(2024, 6, 4)])[0].quantity == "2 tablets"

    @pytest.mark.unit
    def test_as_needed_never_produces_instances(self, expander, weekday_schedule, june_week):
        """As-needed schedules have no required doses"""
        weekday_schedule["as_needed"] = True

        assert expander.expand(weekday_schedule, june_week) == []

    @pytest.mark.unit
    def test_empty_days_produce_nothing(self, expander, weekday_schedule, june_week, caplog):
        """A schedule with no days at all is inactive and logged"""
        weekday_schedule["days_of_week"] = []

        with caplog.at_level("WARNING"):
            assert expander.expand(weekday_schedule, june_week) == []

        assert "never active" in caplog.text

    @pytest.mark.unit
    def test_disabled_schedule_is_skipped(self, expander, weekday_schedule, june_week):
        """Schedules switched off produce no doses"""
        weekday_schedule["active"] = False

        assert expander.expand(weekday_schedule, june_week) == []

    @pytest.mark.unit
    def test_days_of_week_as_json_string(self, expander, weekday_schedule, june_week):
        """Days stored as a JSON string are understood"""
        weekday_schedule["days_of_week"] = "[0, 6]"

        instances = expander.expand(weekday_schedule, june_week)

        assert [i.date for i in instances] == [date(2024, 6, 2), date(2024, 6, 8)]

    @pytest.mark.unit
    def test_instance_carries_identity(self, expander, weekday_schedule):
        """Instances name their schedule and medication"""
        instance = expander.expand(weekday_schedule, [date(2024, 6, 3)])[0]

        assert instance == DoseInstance(
            date=date(2024, 6, 3),
            time=time(8, 0),
            quantity="1 tablet",
            schedule_id=1,
            medication_id=10
        )
        assert instance.time_label == "08:00"


# =============================================================================
# Upcoming View Tests
# =============================================================================

class TestUpcoming:
    """Tests for what is left to do from now"""

    @pytest.fixture
    def daily_schedules(self):
        return [
            {"id": 1, "medication_id": 10, "time": "08:00", "days_of_week": [0, 1, 2, 3, 4, 5, 6]},
            {"id": 2, "medication_id": 10, "time": "20:00", "days_of_week": [0, 1, 2, 3, 4, 5, 6]},
        ]

    @pytest.mark.unit
    def test_today_and_tomorrow_sorted(self, expander, daily_schedules):
        """Before the first dose, everything today and tomorrow is upcoming"""
        now = datetime(2024, 6, 3, 7, 0)

        upcoming = expander.upcoming(daily_schedules, now)

        assert [(i.date, i.time_label) for i in upcoming] == [
            (date(2024, 6, 3), "08:00"),
            (date(2024, 6, 3), "20:00"),
            (date(2024, 6, 4), "08:00"),
            (date(2024, 6, 4), "20:00"),
        ]

    @pytest.mark.unit
    def test_past_doses_today_are_dropped(self, expander, daily_schedules):
        """Doses at or before the current minute are no longer upcoming"""
        now = datetime(2024, 6, 3, 8, 0, 30)

        upcoming = expander.upcoming(daily_schedules, now)

        assert (date(2024, 6, 3), "08:00") not in [(i.date, i.time_label) for i in upcoming]
        assert upcoming[0].time_label == "20:00"

    @pytest.mark.unit
    def test_taken_doses_today_are_dropped(self, expander, daily_schedules):
        """A schedule already logged today is not upcoming today"""
        now = datetime(2024, 6, 3, 7, 0)

        upcoming = expander.upcoming(daily_schedules, now, taken_today={2})

        today = [i for i in upcoming if i.date == now.date()]
        assert [i.schedule_id for i in today] == [1]
        # Tomorrow is unaffected
        assert len([i for i in upcoming if i.date == date(2024, 6, 4)]) == 2

    @pytest.mark.unit
    def test_lookahead_extends_window(self, expander, daily_schedules):
        """A longer lookahead includes more days"""
        now = datetime(2024, 6, 3, 21, 0)

        upcoming = expander.upcoming(daily_schedules, now, lookahead_days=2)

        assert {i.date for i in upcoming} == {date(2024, 6, 4), date(2024, 6, 5)}

    @pytest.mark.unit
    def test_as_needed_not_upcoming(self, expander):
        """As-needed schedules never appear"""
        schedules = [{"id": 3, "medication_id": 11, "time": "09:00", "as_needed": True}]

        assert expander.upcoming(schedules, datetime(2024, 6, 3, 7, 0)) == []


class TestDateRange:
    """Tests for the inclusive date range helper"""

    @pytest.mark.unit
    def test_inclusive(self):
        start = date(2024, 6, 1)
        assert date_range(start, start + timedelta(days=2)) == [
            date(2024, 6, 1), date(2024, 6, 2), date(2024, 6, 3)
        ]

    @pytest.mark.unit
    def test_inverted_is_empty(self):
        assert date_range(date(2024, 6, 3), date(2024, 6, 1)) == []
