"""
Tests for models.py - rule construction, validation and serialization.
"""
import pytest
import sys
import os
from datetime import date, datetime

from pydantic import ValidationError

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import (
    CustomDays,
    Daily,
    Monthly,
    NoRecurrence,
    NthWeekday,
    Reminder,
    SpecificDays,
    Weekday,
    Weekly,
    Yearly,
    dump_rule,
    parse_rule,
)


class TestRuleValidation:
    """Malformed rules are rejected when they are built."""

    def test_zero_interval_coerced_to_one(self):
        assert Daily(interval=0).interval == 1
        assert CustomDays(interval=0).interval == 1
        assert Daily(interval=None).interval == 1

    def test_negative_interval_rejected(self):
        with pytest.raises(ValidationError):
            Daily(interval=-2)
        with pytest.raises(ValidationError):
            CustomDays(interval=-1)

    def test_day_of_month_range(self):
        assert Monthly(day_of_month=31).day_of_month == 31
        with pytest.raises(ValidationError):
            Monthly(day_of_month=0)
        with pytest.raises(ValidationError):
            Monthly(day_of_month=32)

    def test_nth_weekday_n_values(self):
        assert NthWeekday(n=-1, weekday=Weekday.FRIDAY).n == -1
        assert NthWeekday(n=5, weekday=Weekday.MONDAY).n == 5
        for bad in (0, 6, -2):
            with pytest.raises(ValidationError):
                NthWeekday(n=bad, weekday=Weekday.MONDAY)

    def test_specific_days_requires_a_day(self):
        with pytest.raises(ValidationError):
            SpecificDays(days_of_week=[])

    def test_weekly_allows_empty_day_set(self):
        """An empty weekly set is constructible; it just never occurs."""
        assert Weekly(days_of_week=[]).days_of_week == frozenset()
        assert Weekly().days_of_week is None

    def test_invalid_weekday_rejected(self):
        with pytest.raises(ValidationError):
            SpecificDays(days_of_week=[7])
        with pytest.raises(ValidationError):
            NthWeekday(n=1, weekday="funday")

    def test_malformed_day_input_rejected(self):
        """Wrong shapes for day fields fail validation rather than crashing."""
        with pytest.raises(ValidationError):
            parse_rule({"type": "weekly", "days_of_week": 5})
        with pytest.raises(ValidationError):
            SpecificDays(days_of_week=[None])
        with pytest.raises(ValidationError):
            SpecificDays(days_of_week=[1.5])
        with pytest.raises(ValidationError):
            NthWeekday(n=1, weekday=None)
        with pytest.raises(ValidationError):
            NthWeekday(n=1, weekday=True)

    def test_interval_upper_bound(self):
        assert CustomDays(interval=36500).interval == 36500
        with pytest.raises(ValidationError):
            CustomDays(interval=1000000000)
        with pytest.raises(ValidationError):
            Daily(interval=36501)

    def test_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            Daily(count=0)

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            Yearly(day_of_month=3)

    def test_rules_are_immutable(self):
        rule = Daily(interval=2)
        with pytest.raises(ValidationError):
            rule.interval = 3


class TestWeekdayInput:
    """Weekdays can be given as numbers or names."""

    def test_day_names(self):
        rule = SpecificDays(days_of_week=["MON", "wednesday", "Fri"])
        assert rule.days_of_week == {Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY}

    def test_full_names_and_digits(self):
        rule = SpecificDays(days_of_week=["THURSDAY", " sunday ", "2"])
        assert rule.days_of_week == {Weekday.THURSDAY, Weekday.SUNDAY, Weekday.WEDNESDAY}

    @pytest.mark.parametrize("name", ["Monkey", "Frisbee", "Sunflower", "Tues", "M"])
    def test_lookalike_names_rejected(self, name):
        with pytest.raises(ValidationError):
            NthWeekday(n=1, weekday=name)

    def test_comma_separated_string(self):
        rule = Weekly(days_of_week="MON,WED,FRI")
        assert rule.days_of_week == {Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY}

    def test_duplicates_collapse(self):
        rule = SpecificDays(days_of_week=[0, 0, "MON"])
        assert rule.days_of_week == {Weekday.MONDAY}


class TestSerialization:
    """Rules survive a trip through their stored form."""

    def test_every_variant_round_trips(self):
        rules = [
            NoRecurrence(),
            Daily(interval=3, end_date=date(2025, 1, 1)),
            Weekly(days_of_week=[Weekday.TUESDAY]),
            Weekly(),
            Monthly(day_of_month=31, count=6),
            Monthly(),
            Yearly(),
            CustomDays(interval=10),
            NthWeekday(n=-1, weekday=Weekday.FRIDAY),
            SpecificDays(days_of_week=[Weekday.SATURDAY, Weekday.SUNDAY]),
        ]
        for rule in rules:
            assert parse_rule(dump_rule(rule)) == rule

    def test_dump_format(self):
        data = dump_rule(SpecificDays(days_of_week=[4, 0, 2], end_date=date(2024, 6, 30)))
        assert data == {
            "type": "specific_days",
            "days_of_week": [0, 2, 4],
            "end_date": "2024-06-30",
            "count": None,
        }

    def test_parse_json_string(self):
        rule = parse_rule('{"type": "nth_weekday", "n": 2, "weekday": "MON"}')
        assert rule == NthWeekday(n=2, weekday=Weekday.MONDAY)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_rule({"type": "hourly"})


class TestReminder:
    """Reminder model helpers."""

    def test_anchor_combines_date_and_time(self):
        reminder = Reminder(id="r", title="Water plants", due_date="2024-05-01", due_time="18:30")
        assert reminder.anchor == datetime(2024, 5, 1, 18, 30)
        assert reminder.recurrence == NoRecurrence()
        assert reminder.is_recurring is False

    def test_timezone_aware_values_rejected(self):
        with pytest.raises(ValidationError):
            Reminder(id="r", title="Call", due_date="2024-05-01", due_time="09:00Z")
        with pytest.raises(ValidationError):
            Reminder(id="r", title="Call", due_date="2024-05-01", next_occurrence="2024-05-02T09:00:00+02:00")

    def test_recurrence_from_dict(self):
        reminder = Reminder(
            id="r", title="Rent", due_date="2024-05-01",
            recurrence={"type": "monthly", "day_of_month": 1}, is_recurring=True,
        )
        assert reminder.recurrence == Monthly(day_of_month=1)
