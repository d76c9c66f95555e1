"""Tests for ripples.core.temporal — date phrases and cadence phrases."""

import pytest
from datetime import date

from ripples.core.temporal import extract_dates, parse_recurrence, resolve_due_date

# 2024-06-10 is a Monday.
REF = "2024-06-10"


# ---------------------------------------------------------------------------
# extract_dates
# ---------------------------------------------------------------------------


class TestRelativePhrases:
    @pytest.mark.parametrize("text, expected", [
        ("Call the plumber today", "2024-06-10"),
        ("Call the plumber tonight", "2024-06-10"),
        ("Call the plumber tomorrow", "2024-06-11"),
        ("Call the plumber day after tomorrow", "2024-06-12"),
        ("Call the plumber in 3 days", "2024-06-13"),
        ("Call the plumber in two weeks", "2024-06-24"),
        ("Call the plumber in a month", "2024-07-10"),
        ("Call the plumber next week", "2024-06-17"),
        ("Call the plumber next month", "2024-07-10"),
        ("Call the plumber this Friday", "2024-06-14"),
        ("Call the plumber on Friday", "2024-06-14"),
        ("Call the plumber next Friday", "2024-06-21"),
        ("Call the plumber next Monday", "2024-06-17"),
        ("Call the plumber this weekend", "2024-06-15"),
        ("Call the plumber next weekend", "2024-06-22"),
    ])
    def test_resolves_against_reference(self, text, expected):
        mentions = extract_dates(text, REF)
        assert len(mentions) == 1
        assert mentions[0].date == expected
        assert mentions[0].title == "Call the plumber"

    def test_bare_weekday_on_same_day_is_today(self):
        assert resolve_due_date("Stand-up on Monday", REF) == "2024-06-10"

    def test_this_weekend_from_sunday(self):
        assert resolve_due_date("Clean the garage this weekend", "2024-06-16") == "2024-06-22"

    def test_every_weekday_is_not_a_date(self):
        assert extract_dates("Water the plants every Friday", REF) == []


class TestAbsolutePhrases:
    def test_iso(self):
        mentions = extract_dates("Pay rent on 2024-07-01", REF)
        assert [(m.title, m.date) for m in mentions] == [("Pay rent", "2024-07-01")]

    def test_month_name_with_ordinal(self):
        assert resolve_due_date("Renew passport by June 20th", REF) == "2024-06-20"

    def test_past_month_day_rolls_to_next_year(self):
        mentions = extract_dates("Party on March 3", REF)
        assert mentions[0].date == "2025-03-03"
        assert mentions[0].title == "Party"

    def test_explicit_year_is_kept(self):
        assert resolve_due_date("Conference on March 3, 2026", REF) == "2026-03-03"

    def test_slash_date(self):
        assert resolve_due_date("Book flights on 6/20", REF) == "2024-06-20"

    def test_slash_date_with_year_needs_no_cue(self):
        assert resolve_due_date("Flights 6/20/2025 confirmed", REF) == "2025-06-20"

    @pytest.mark.parametrize("text", [
        "Add 1/2 cup of sugar",
        "We split it 3/4 of the way",
    ])
    def test_bare_fraction_is_not_a_date(self, text):
        assert extract_dates(text, REF) == []

    def test_invalid_calendar_date_is_skipped(self):
        assert extract_dates("Deadline 2024-02-30", REF) == []


class TestTitlesAndTimes:
    def test_title_with_time(self):
        mentions = extract_dates("Dentist appointment tomorrow at 3pm.", REF)
        assert len(mentions) == 1
        m = mentions[0]
        assert m.title == "Dentist appointment"
        assert m.date == "2024-06-11"
        assert m.time_start == "15:00"
        assert m.phrase == "tomorrow"

    @pytest.mark.parametrize("text, expected", [
        ("Lunch with Sam this Friday at noon", "12:00"),
        ("Dinner tomorrow at 18:30", "18:30"),
        ("Call Mia tomorrow at 9:15 am", "09:15"),
        ("Flight tomorrow 12am", "00:00"),
        ("Deploy tomorrow at midnight", "00:00"),
    ])
    def test_time_formats(self, text, expected):
        assert extract_dates(text, REF)[0].time_start == expected

    def test_no_time(self):
        assert extract_dates("Pay rent tomorrow", REF)[0].time_start is None

    def test_phrase_opening_the_sentence_uses_whole_sentence(self):
        mentions = extract_dates("Tomorrow I will clean the garage.", REF)
        assert mentions[0].title == "Tomorrow I will clean the garage"

    def test_one_mention_per_sentence_phrase(self):
        mentions = extract_dates("Call the bank tomorrow. Book flights on 6/20.", REF)
        assert [(m.title, m.date) for m in mentions] == [
            ("Call the bank", "2024-06-11"),
            ("Book flights", "2024-06-20"),
        ]

    def test_day_after_tomorrow_is_not_also_tomorrow(self):
        mentions = extract_dates("Move the car the day after tomorrow", REF)
        assert [m.date for m in mentions] == ["2024-06-12"]

    def test_duplicates_collapse_by_title_and_date(self):
        mentions = extract_dates("Gym today. Gym tonight.", REF)
        assert len(mentions) == 1

    def test_accepts_date_reference(self):
        assert resolve_due_date("Call mom tomorrow", date(2024, 6, 10)) == "2024-06-11"


class TestNoMatch:
    @pytest.mark.parametrize("text", [None, "", "   ", "Nothing dated in here at all"])
    def test_empty_results(self, text):
        assert extract_dates(text, REF) == []
        assert resolve_due_date(text, REF) is None

    def test_offset_past_calendar_range(self):
        assert extract_dates("Pay the bill in 5000000 days", REF) == []

    def test_offset_past_calendar_range_keeps_other_mentions(self):
        mentions = extract_dates("Pay the bill in 5000000 days. Call the bank tomorrow.", REF)
        assert [m.date for m in mentions] == ["2024-06-11"]


# ---------------------------------------------------------------------------
# parse_recurrence
# ---------------------------------------------------------------------------


class TestParseRecurrence:
    @pytest.mark.parametrize("text, rrule, next_date", [
        ("Take vitamins daily", "FREQ=DAILY", "2024-06-11"),
        ("Stretch every day", "FREQ=DAILY", "2024-06-11"),
        ("Water the cactus every 3 days", "FREQ=DAILY;INTERVAL=3", "2024-06-13"),
        ("Weekly review", "FREQ=WEEKLY", "2024-06-17"),
        ("Team sync every other week", "FREQ=WEEKLY;INTERVAL=2", "2024-06-24"),
        ("Pay rent monthly", "FREQ=MONTHLY", "2024-07-10"),
        ("Check the filters quarterly", "FREQ=MONTHLY;INTERVAL=3", "2024-09-10"),
        ("Renew the domain yearly", "FREQ=YEARLY", "2025-06-10"),
        ("Gym every monday, wednesday and friday", "FREQ=WEEKLY;BYDAY=MO,WE,FR", "2024-06-12"),
        ("Run on weekdays", "FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR", "2024-06-11"),
        ("Hike on weekends", "FREQ=WEEKLY;BYDAY=SA,SU", "2024-06-15"),
        ("Piano every other tuesday", "FREQ=WEEKLY;INTERVAL=2;BYDAY=TU", "2024-06-11"),
        ("Book club every first monday of the month", "FREQ=MONTHLY;BYDAY=MO;BYSETPOS=1",
         "2024-07-01"),
        ("Board games every last friday", "FREQ=MONTHLY;BYDAY=FR;BYSETPOS=-1", "2024-06-28"),
        ("Pay the card every month on the 15th", "FREQ=MONTHLY;BYMONTHDAY=15", "2024-06-15"),
        ("Mom's birthday June 5 every year", "FREQ=YEARLY;BYMONTHDAY=5;BYMONTH=6", "2025-06-05"),
        ("Anniversary every year on March 3rd", "FREQ=YEARLY;BYMONTHDAY=3;BYMONTH=3",
         "2025-03-03"),
    ])
    def test_phrases(self, text, rrule, next_date):
        match = parse_recurrence(text, REF)
        assert match is not None
        assert match.rrule == rrule
        assert match.next_date == next_date

    def test_label(self):
        match = parse_recurrence("Every Friday I need to water the plants.", REF)
        assert match.rrule == "FREQ=WEEKLY;BYDAY=FR"
        assert match.next_date == "2024-06-14"
        assert match.label == "Every FR"

    def test_each_works_like_every(self):
        assert parse_recurrence("Call grandma each Sunday", REF).rrule == "FREQ=WEEKLY;BYDAY=SU"

    def test_abbreviated_weekdays(self):
        match = parse_recurrence("Swim every tue and thurs", REF)
        assert match.rrule == "FREQ=WEEKLY;BYDAY=TU,TH"

    @pytest.mark.parametrize("text", [
        None,
        "",
        "I need to call mom",
        "Clean the garage this weekend",
        "Buy groceries next Friday",
    ])
    def test_no_cadence(self, text):
        assert parse_recurrence(text, REF) is None

    def test_huge_day_interval(self):
        match = parse_recurrence("Replace the filter every 1000 days", REF)
        assert match.rrule == "FREQ=DAILY;INTERVAL=1000"
        assert match.next_date == "2027-03-07"

    def test_interval_with_no_reachable_date(self):
        match = parse_recurrence("Plant a tree every 99999 years", REF)
        assert match.rrule == "FREQ=YEARLY;INTERVAL=99999"
        assert match.next_date is None
