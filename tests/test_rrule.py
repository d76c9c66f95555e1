"""Tests for ripples.core.rrule — RecurrenceRule model and wire format."""

import pytest
from datetime import date
from pydantic import ValidationError

from ripples.core.rrule import RecurrenceRule, humanize, parse_rrule_fields


class TestToRrule:
    def test_keys_in_fixed_order(self):
        rule = RecurrenceRule(
            freq="MONTHLY", interval=2, by_weekday=["FR"], by_set_position=1,
            until=date(2024, 12, 31),
        )
        assert rule.to_rrule() == "FREQ=MONTHLY;INTERVAL=2;BYDAY=FR;BYSETPOS=1;UNTIL=2024-12-31"

    def test_interval_one_is_omitted(self):
        assert RecurrenceRule(freq="DAILY").to_rrule() == "FREQ=DAILY"

    def test_absent_keys_are_not_written_empty(self):
        text = RecurrenceRule(freq="WEEKLY", by_weekday="MO,TH").to_rrule()
        assert text == "FREQ=WEEKLY;BYDAY=MO,TH"
        assert "BYMONTHDAY" not in text

    def test_yearly_month_and_day(self):
        rule = RecurrenceRule(freq="YEARLY", by_month=6, by_month_day=5)
        assert rule.to_rrule() == "FREQ=YEARLY;BYMONTHDAY=5;BYMONTH=6"


class TestFromRrule:
    def test_parses_every_key(self):
        rule = RecurrenceRule.from_rrule(
            "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;UNTIL=20241231"
        )
        assert rule.freq == "WEEKLY"
        assert rule.interval == 2
        assert rule.by_weekday == ("MO", "WE")
        assert rule.until == date(2024, 12, 31)

    def test_iso_until(self):
        rule = RecurrenceRule.from_rrule("FREQ=DAILY;UNTIL=2024-06-30")
        assert rule.until == date(2024, 6, 30)

    def test_rrule_prefix_and_lowercase(self):
        rule = RecurrenceRule.from_rrule("RRULE:freq=monthly;bymonthday=15")
        assert rule.freq == "MONTHLY"
        assert rule.by_month_day == 15

    def test_missing_freq_raises(self):
        with pytest.raises(ValueError):
            RecurrenceRule.from_rrule("INTERVAL=2;BYDAY=MO")

    def test_unknown_freq_raises(self):
        with pytest.raises(ValueError):
            RecurrenceRule.from_rrule("FREQ=HOURLY")

    def test_written_form_reads_back(self):
        text = "FREQ=MONTHLY;BYDAY=TU;BYSETPOS=-1"
        assert RecurrenceRule.from_rrule(text).to_rrule() == text


class TestValidation:
    def test_rule_without_freq_cannot_be_built(self):
        with pytest.raises(ValidationError):
            RecurrenceRule()

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(freq="DAILY", interval=0)

    def test_set_position_needs_exactly_one_weekday(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(freq="MONTHLY", by_set_position=2)
        with pytest.raises(ValidationError):
            RecurrenceRule(freq="MONTHLY", by_set_position=2, by_weekday=["MO", "TU"])

    def test_set_position_range(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(freq="MONTHLY", by_set_position=5, by_weekday=["MO"])

    def test_month_day_range(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(freq="MONTHLY", by_month_day=32)

    def test_weekdays_are_uppercased_and_deduplicated(self):
        rule = RecurrenceRule(freq="WEEKLY", by_weekday=["mo", "MO", "fr"])
        assert rule.by_weekday == ("MO", "FR")

    def test_rule_is_immutable(self):
        rule = RecurrenceRule(freq="DAILY")
        with pytest.raises(ValidationError):
            rule.interval = 3


class TestParseFields:
    def test_lenient_split(self):
        assert parse_rrule_fields("FREQ=DAILY;;INTERVAL= 2 ") == {"FREQ": "DAILY", "INTERVAL": "2"}

    def test_none(self):
        assert parse_rrule_fields(None) == {}


class TestHumanize:
    @pytest.mark.parametrize("rrule, label", [
        ("FREQ=DAILY", "Every day"),
        ("FREQ=DAILY;INTERVAL=3", "Every 3 days"),
        ("FREQ=WEEKLY", "Every week"),
        ("FREQ=WEEKLY;BYDAY=FR", "Every FR"),
        ("FREQ=WEEKLY;INTERVAL=2;BYDAY=MO", "Every 2 weeks on MO"),
        ("FREQ=MONTHLY;BYMONTHDAY=15", "Every month on the 15"),
        ("FREQ=MONTHLY;BYDAY=FR;BYSETPOS=-1", "Every last FR each month"),
        ("FREQ=MONTHLY;INTERVAL=3", "Every 3 months"),
        ("FREQ=YEARLY;BYMONTHDAY=5;BYMONTH=6", "Every year on 6/5"),
        ("FREQ=YEARLY", "Every year"),
    ])
    def test_labels(self, rrule, label):
        assert humanize(RecurrenceRule.from_rrule(rrule)) == label
