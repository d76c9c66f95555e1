"""
Journal Ripples — Recurrence Rule Expander.

Turns a rule + anchor date into the concrete occurrence dates inside an
inclusive window. Recurring appointments are stored once (rule + anchor) and
their instances are computed fresh on every read; nothing here caches or
persists occurrences.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, YEARLY, rrule

from ripples.core.rrule import WEEKDAY_CODES, RecurrenceRule

logger = logging.getLogger(__name__)

_FREQUENCIES = {"DAILY": DAILY, "WEEKLY": WEEKLY, "MONTHLY": MONTHLY, "YEARLY": YEARLY}
_RRULE_WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)

# Successively wider look-ahead windows used by next_occurrence().
_LOOKAHEAD_DAYS = (62, 400)


def to_date(value: date | datetime | str) -> date:
    """Coerce a date, datetime or ISO string (date part only) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _coerce_rule(rule: RecurrenceRule | str | None) -> RecurrenceRule | None:
    if isinstance(rule, RecurrenceRule):
        return rule
    if not rule:
        return None
    try:
        return RecurrenceRule.from_rrule(rule)
    except ValueError as exc:
        logger.debug("Ignoring unusable recurrence rule %r: %s", rule, exc)
        return None


def _midnight(d: date) -> datetime:
    return datetime.combine(d, time.min)


def _build_rrule(rule: RecurrenceRule, anchor: date) -> rrule:
    """dateutil rule for a RecurrenceRule starting at the anchor.

    BY* fields are passed only where the frequency honors them, falling back
    to the anchor's weekday, day or month:

        WEEKLY   weekdays
        MONTHLY  month-day, or one weekday with a set position
        YEARLY   month and month-day
    """
    kwargs: dict[str, object] = {
        "interval": rule.interval,
        "wkst": MO,
        "dtstart": _midnight(anchor),
    }
    if rule.until is not None:
        kwargs["until"] = _midnight(rule.until)

    if rule.freq == "WEEKLY":
        codes = rule.by_weekday or (WEEKDAY_CODES[anchor.weekday()],)
        kwargs["byweekday"] = [_RRULE_WEEKDAYS[WEEKDAY_CODES.index(c)] for c in codes]
    elif rule.freq == "MONTHLY":
        if rule.by_month_day is not None:
            kwargs["bymonthday"] = rule.by_month_day
        elif rule.by_set_position is not None:
            kwargs["byweekday"] = _RRULE_WEEKDAYS[WEEKDAY_CODES.index(rule.by_weekday[0])]
            kwargs["bysetpos"] = rule.by_set_position
        else:
            kwargs["bymonthday"] = anchor.day
    elif rule.freq == "YEARLY":
        kwargs["bymonth"] = rule.by_month or anchor.month
        kwargs["bymonthday"] = rule.by_month_day or anchor.day

    return rrule(_FREQUENCIES[rule.freq], **kwargs)


def expand(
    rule: RecurrenceRule | str | None,
    anchor: date | str,
    window_start: date | str,
    window_end: date | str,
) -> list[str]:
    """Return every occurrence of rule inside [window_start, window_end].

    Occurrences never precede the anchor and never pass the rule's until
    bound. Month-days that do not exist in a month (e.g. the 31st of April)
    produce no occurrence that month. A missing, unparsable or unknown rule
    yields an empty list rather than an error.

    Returns sorted ISO date strings (YYYY-MM-DD).
    """
    parsed = _coerce_rule(rule)
    if parsed is None or parsed.freq not in _FREQUENCIES:
        return []

    try:
        start = to_date(anchor)
        lo = max(to_date(window_start), start)
        hi = to_date(window_end)
    except ValueError as exc:
        logger.warning("Cannot expand %s: bad date bound (%s)", parsed.to_rrule(), exc)
        return []

    if parsed.until is not None:
        hi = min(hi, parsed.until)
    if lo > hi:
        return []

    try:
        found = _build_rrule(parsed, start).between(_midnight(lo), _midnight(hi), inc=True)
    except (OverflowError, ValueError) as exc:
        logger.warning("Cannot expand %s: %s", parsed.to_rrule(), exc)
        return []
    return [dt.date().isoformat() for dt in found]


def _horizon_end(first: date, days: int) -> date:
    try:
        return first + timedelta(days=days)
    except OverflowError:
        return date.max


def next_occurrence(
    rule: RecurrenceRule | str | None,
    after: date | str,
    anchor: date | str | None = None,
) -> str | None:
    """Return the first occurrence strictly after `after`, or None.

    The anchor defaults to `after` itself, which is how phrase parsing
    computes a "next due" date relative to the journal day.
    """
    parsed = _coerce_rule(rule)
    if parsed is None:
        return None

    after_d = to_date(after)
    anchor_d = to_date(anchor) if anchor is not None else after_d
    if after_d >= date.max:
        return None
    first = after_d + timedelta(days=1)

    # Yearly Feb 29 rules can skip eight years; scale the widest window by interval.
    horizons = _LOOKAHEAD_DAYS + (366 * 9 * parsed.interval,)
    for days in horizons:
        end = _horizon_end(first, days)
        found = expand(parsed, anchor_d, first, end)
        if found:
            return found[0]
        if end == date.max:
            break
    return None
