"""
Journal Ripples — Temporal Resolver.

Two independent capabilities sharing only a reference ("now") date:

- extract_dates(): finds explicit date phrases ("this Friday", "June 5th",
  "in 3 days", "2024-06-14", ...) plus an optional time of day, and returns
  one DateMention per phrase with the text that precedes it as the title.
- parse_recurrence(): recognizes cadence phrases ("every other week",
  "every first Monday", "June 5 every year", ...) and returns a normalized
  RecurrenceRule together with its next occurrence and a display label.

Neither function raises on unrecognized text; they return [] / None.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta
from pydantic import BaseModel

from ripples.core.recurrence import next_occurrence, to_date
from ripples.core.rrule import WEEKDAY_CODES, RecurrenceRule, humanize

logger = logging.getLogger(__name__)

_FLAGS = re.IGNORECASE

_WEEKDAY_NAMES = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)
_WEEKDAY_FULL = "|".join(_WEEKDAY_NAMES)
# Longest alternatives first so "thurs" is not cut to "thu".
_WEEKDAY_ANY = _WEEKDAY_FULL + "|mon|tues|tue|wed|thurs|thur|thu|fri|sat|sun"

_MONTH = (
    r"january|february|march|april|may|june|july|august|september|october"
    r"|november|december|jan|feb|mar|apr|jun|jul|aug|sept|sep|oct|nov|dec"
)

_NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

_CONNECTORS_RE = re.compile(r"(?:[\s,;:-]|\b(?:on|by|at|for|due|before|until)\b)+$", _FLAGS)
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+|\n+")


class DateMention(BaseModel):
    """One explicit date phrase found in text."""

    title: str
    date: str                       # ISO YYYY-MM-DD
    time_start: str | None = None   # HH:MM
    phrase: str = ""


class RecurrenceMatch(BaseModel):
    """A recognized cadence phrase."""

    rule: RecurrenceRule
    next_date: str | None = None
    label: str = ""

    @property
    def rrule(self) -> str:
        return self.rule.to_rrule()


# ---------------------------------------------------------------------------
# Date phrases
# ---------------------------------------------------------------------------

_DATE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (kind, re.compile(pattern, _FLAGS))
    for kind, pattern in (
        ("iso", r"\b(\d{4})-(\d{2})-(\d{2})\b"),
        ("month_day", r"\b(" + _MONTH + r")\s+(\d{1,2})(?:st|nd|rd|th)?\b(?:,?\s*(\d{4})\b)?"),
        # Without a year a bare N/M needs a date cue, so "1/2 cup" is not a date.
        ("slash", r"(?:\b(on|by|due|before|until)\s+)?\b(\d{1,2})/(\d{1,2})(?:/(\d{4}))?\b"),
        ("day_after_tomorrow", r"\bday\s+after\s+tomorrow\b"),
        ("today", r"\b(?:today|tonight)\b"),
        ("tomorrow", r"\btomorrow\b"),
        ("offset", r"\bin\s+(\d+|an?|one|two|three|four|five|six|seven|eight|nine|ten)"
                   r"\s+(day|week|month)s?\b"),
        ("next_week", r"\bnext\s+week\b"),
        ("next_month", r"\bnext\s+month\b"),
        ("weekend", r"\b(this|next)\s+weekend\b"),
        ("weekday", r"\b(?:(this|next|every|each)\s+)?(" + _WEEKDAY_FULL + r")\b"),
    )
)

_TIME_RE = re.compile(
    r"\b(?:(?P<h12>\d{1,2})(?::(?P<m12>\d{2}))?\s*(?P<ampm>am|pm)\b"
    r"|at\s+(?P<h24>\d{1,2}):(?P<m24>\d{2})\b"
    r"|(?P<noon>noon)\b"
    r"|(?P<midnight>midnight)\b)",
    _FLAGS,
)


def _parse_absolute(raw: str, reference: date, has_year: bool) -> date | None:
    """Parse a month/day phrase with dateutil; roll past dates to next year."""
    try:
        parsed = dateutil_parser.parse(raw, default=datetime(reference.year, 1, 1)).date()
    except (ValueError, OverflowError):
        return None
    if not has_year and parsed < reference:
        try:
            parsed = parsed.replace(year=parsed.year + 1)
        except ValueError:
            return None
    return parsed


def _coming_weekday(reference: date, weekday: int) -> date:
    return reference + timedelta(days=(weekday - reference.weekday()) % 7)


def _resolve(kind: str, match: re.Match[str], reference: date) -> date | None:
    if kind == "iso":
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError:
            return None
    if kind == "month_day":
        month, day, year = match.group(1), match.group(2), match.group(3)
        return _parse_absolute(f"{month} {day} {year or ''}".strip(), reference, bool(year))
    if kind == "slash":
        cue, month, day, year = match.group(1, 2, 3, 4)
        if not cue and not year:
            return None
        raw = f"{month}/{day}/{year}" if year else f"{month}/{day}"
        return _parse_absolute(raw, reference, bool(year))
    if kind == "today":
        return reference
    if kind == "tomorrow":
        return reference + timedelta(days=1)
    if kind == "day_after_tomorrow":
        return reference + timedelta(days=2)
    if kind == "offset":
        token = match.group(1).lower()
        unit = match.group(2).lower()
        try:
            amount = int(token) if token.isdigit() else _NUMBER_WORDS[token]
            if unit == "day":
                return reference + timedelta(days=amount)
            if unit == "week":
                return reference + timedelta(weeks=amount)
            return reference + relativedelta(months=amount)
        except (OverflowError, ValueError):
            return None
    if kind == "next_week":
        return reference + timedelta(days=7)
    if kind == "next_month":
        return reference + relativedelta(months=1)
    if kind == "weekend":
        saturday = _coming_weekday(reference, 5)
        if reference.weekday() == 6:
            saturday = reference + timedelta(days=6)
        return saturday + timedelta(days=7) if match.group(1).lower() == "next" else saturday
    if kind == "weekday":
        qualifier = (match.group(1) or "").lower()
        if qualifier in ("every", "each"):
            return None
        weekday = _WEEKDAY_NAMES.index(match.group(2).lower())
        if qualifier == "next":
            next_monday = reference + timedelta(days=7 - reference.weekday())
            return next_monday + timedelta(days=weekday)
        return _coming_weekday(reference, weekday)
    return None


def _find_time(sentence: str) -> str | None:
    """Return the first time of day in a sentence as HH:MM."""
    for m in _TIME_RE.finditer(sentence):
        if m.group("noon"):
            return "12:00"
        if m.group("midnight"):
            return "00:00"
        if m.group("ampm"):
            hour, minute = int(m.group("h12")), int(m.group("m12") or 0)
            if not 1 <= hour <= 12 or minute > 59:
                continue
            hour = hour % 12 + (12 if m.group("ampm").lower() == "pm" else 0)
            return f"{hour:02d}:{minute:02d}"
        hour, minute = int(m.group("h24")), int(m.group("m24"))
        if hour <= 23 and minute <= 59:
            return f"{hour:02d}:{minute:02d}"
    return None


def _phrase_matches(sentence: str) -> list[tuple[str, re.Match[str]]]:
    """All date-phrase matches in a sentence, left to right, without overlaps."""
    hits = [
        (kind, m)
        for kind, pattern in _DATE_PATTERNS
        for m in pattern.finditer(sentence)
    ]
    hits.sort(key=lambda hit: (hit[1].start(), -(hit[1].end() - hit[1].start())))

    chosen: list[tuple[str, re.Match[str]]] = []
    last_end = -1
    for kind, m in hits:
        if m.start() >= last_end:
            chosen.append((kind, m))
            last_end = m.end()
    return chosen


def _title_before(sentence: str, start: int) -> str:
    title = _CONNECTORS_RE.sub("", sentence[:start]).strip()
    if not title:
        title = sentence.strip().rstrip(".!?").strip()
    return re.sub(r"\s+", " ", title)


def extract_dates(text: str | None, reference: date | str) -> list[DateMention]:
    """Find explicit date mentions in text, relative to a reference date.

    The title is the sentence text preceding the phrase (trailing
    connectors such as "on" or "by" removed), or the whole sentence when
    the phrase opens it. The first time of day in a sentence attaches to
    every date found in that sentence. Results are unique by
    (lower-cased title, date).
    """
    if not text or not text.strip():
        return []
    ref = to_date(reference)

    mentions: list[DateMention] = []
    seen: set[tuple[str, str]] = set()
    for sentence in _SENTENCE_SPLIT_RE.split(text):
        if not sentence.strip():
            continue
        time_start = None
        for kind, m in _phrase_matches(sentence):
            resolved = _resolve(kind, m, ref)
            if resolved is None:
                logger.debug("Unresolved date phrase %r", m.group(0))
                continue
            if time_start is None:
                time_start = _find_time(sentence)
            title = _title_before(sentence, m.start())
            key = (title.lower(), resolved.isoformat())
            if key in seen:
                continue
            seen.add(key)
            mentions.append(DateMention(
                title=title,
                date=resolved.isoformat(),
                time_start=time_start,
                phrase=m.group(0),
            ))
    return mentions


def resolve_due_date(text: str | None, reference: date | str) -> str | None:
    """Return the ISO date of the first explicit date phrase, or None."""
    mentions = extract_dates(text, reference)
    return mentions[0].date if mentions else None


# ---------------------------------------------------------------------------
# Recurrence phrases
# ---------------------------------------------------------------------------

_UNIT_FREQ = {"day": "DAILY", "week": "WEEKLY", "month": "MONTHLY", "year": "YEARLY"}
_ORDINALS = {
    "first": 1, "1st": 1, "second": 2, "2nd": 2, "third": 3, "3rd": 3,
    "fourth": 4, "4th": 4, "last": -1,
}

_DAILY_RE = re.compile(r"\b(?:daily|(?:every|each)\s+day)\b", _FLAGS)
_WEEKLY_RE = re.compile(r"\b(?:weekly|(?:every|each)\s+week)\b", _FLAGS)
_MONTHLY_RE = re.compile(r"\b(?:monthly|(?:every|each)\s+month)\b", _FLAGS)
_YEARLY_RE = re.compile(r"\b(?:annually|yearly|(?:every|each)\s+year)\b", _FLAGS)
_QUARTERLY_RE = re.compile(r"\bquarterly\b", _FLAGS)
_EVERY_OTHER_RE = re.compile(r"\bevery\s+other\s+(day|week|month|year)s?\b", _FLAGS)
_EVERY_N_RE = re.compile(r"\bevery\s+(\d+)\s+(day|week|month|year)s?\b", _FLAGS)
_WEEKDAYS_RE = re.compile(r"\b(?:weekdays|(?:every|each)\s+weekday)\b", _FLAGS)
_WEEKENDS_RE = re.compile(r"\b(?:weekends|(?:every|each)\s+weekend)\b", _FLAGS)
_WEEKDAY_TOKEN = r"(?:" + _WEEKDAY_ANY + r")\b"
_WEEKDAY_LIST_RE = re.compile(
    r"\b(?:every|each)\s+(" + _WEEKDAY_TOKEN
    + r"(?:\s*(?:,|/|&|\band\b)\s*(?:and\s+)?" + _WEEKDAY_TOKEN + r")*)",
    _FLAGS,
)
_EVERY_OTHER_WEEKDAY_RE = re.compile(r"\bevery\s+other\s+(" + _WEEKDAY_ANY + r")\b", _FLAGS)
_ORDINAL_WEEKDAY_RE = re.compile(
    r"\bevery\s+(first|second|third|fourth|last|1st|2nd|3rd|4th)\s+(" + _WEEKDAY_ANY + r")\b"
    r"(?:\s+of\s+(?:the|each|every)\s+month)?",
    _FLAGS,
)
_MONTH_DAY_RE = re.compile(
    r"\bevery\s+month\s+(?:on\s+)?the\s+(\d{1,2})(?:st|nd|rd|th)?\b", _FLAGS,
)
_YEARLY_DATE_RES = (
    re.compile(r"\b(" + _MONTH + r")\s+(\d{1,2})(?:st|nd|rd|th)?\b.*\bevery\s+year\b", _FLAGS),
    re.compile(r"\bevery\s+year\s+on\s+(" + _MONTH + r")\s+(\d{1,2})(?:st|nd|rd|th)?\b", _FLAGS),
)
_WEEKDAY_ANY_RE = re.compile(r"\b(?:" + _WEEKDAY_ANY + r")\b", _FLAGS)


def _weekday_code(token: str) -> str:
    return WEEKDAY_CODES[[name[:3] for name in _WEEKDAY_NAMES].index(token[:3].lower())]


def _month_number(token: str) -> int:
    return [name[:3] for name in _MONTH.split("|")[:12]].index(token[:3].lower()) + 1


def parse_recurrence(text: str | None, reference: date | str) -> RecurrenceMatch | None:
    """Detect a cadence phrase and normalize it into a RecurrenceRule.

    Forms are tried in a fixed order and later, more specific forms refine
    or override what earlier ones set, so "every month on the 15th" ends up
    MONTHLY with a month-day. Returns None when no cadence is found.
    """
    if not text or not text.strip():
        return None

    fields: dict[str, object] = {}

    if _DAILY_RE.search(text):
        fields["freq"] = "DAILY"
    if _WEEKLY_RE.search(text):
        fields["freq"] = "WEEKLY"
    if _MONTHLY_RE.search(text):
        fields["freq"] = "MONTHLY"
    if _YEARLY_RE.search(text):
        fields["freq"] = "YEARLY"
    if _QUARTERLY_RE.search(text):
        fields.update(freq="MONTHLY", interval=3)

    if m := _EVERY_OTHER_RE.search(text):
        fields.update(freq=_UNIT_FREQ[m.group(1).lower()], interval=2)
    if m := _EVERY_N_RE.search(text):
        fields.update(freq=_UNIT_FREQ[m.group(2).lower()], interval=max(1, int(m.group(1))))

    if _WEEKDAYS_RE.search(text):
        fields.update(freq="WEEKLY", by_weekday=("MO", "TU", "WE", "TH", "FR"))
    if _WEEKENDS_RE.search(text):
        fields.update(freq="WEEKLY", by_weekday=("SA", "SU"))

    if m := _WEEKDAY_LIST_RE.search(text):
        codes = [_weekday_code(tok) for tok in _WEEKDAY_ANY_RE.findall(m.group(1))]
        fields.update(freq="WEEKLY", by_weekday=tuple(codes))
    if m := _EVERY_OTHER_WEEKDAY_RE.search(text):
        fields.update(freq="WEEKLY", interval=2, by_weekday=(_weekday_code(m.group(1)),))

    if m := _ORDINAL_WEEKDAY_RE.search(text):
        fields.update(
            freq="MONTHLY",
            by_set_position=_ORDINALS[m.group(1).lower()],
            by_weekday=(_weekday_code(m.group(2)),),
        )

    if m := _MONTH_DAY_RE.search(text):
        fields.update(freq="MONTHLY", by_month_day=max(1, min(31, int(m.group(1)))))

    for pattern in _YEARLY_DATE_RES:
        if m := pattern.search(text):
            fields.update(
                freq="YEARLY",
                by_month=_month_number(m.group(1)),
                by_month_day=int(m.group(2)),
            )
            break

    if "freq" not in fields:
        return None
    if fields.get("by_set_position") is not None and len(fields.get("by_weekday", ())) != 1:
        fields.pop("by_set_position")

    try:
        rule = RecurrenceRule(**fields)
    except ValueError as exc:
        logger.debug("Discarding recurrence phrase in %r: %s", text, exc)
        return None

    return RecurrenceMatch(
        rule=rule,
        next_date=next_occurrence(rule, reference),
        label=humanize(rule),
    )
