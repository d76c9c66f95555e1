"""
Journal Ripples — Appointment listing.

Lists a user's appointments in a date range. Recurring appointments are
stored once (rule + anchor date); their instances are expanded fresh on
every call and never persisted. A persisted one-off with the same date,
start time and title as a virtual instance replaces it, which is how a
single instance of a series gets moved or edited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from ripples.core.recurrence import expand, to_date

if TYPE_CHECKING:
    from ripples.data.models import Appointment
    from ripples.ports.storage_port import AppointmentStore

logger = logging.getLogger(__name__)


@dataclass
class Occurrence:
    """One appointment instance in a listing."""

    date: str
    title: str
    appointment_id: int
    time_start: str | None = None
    time_end: str | None = None
    rrule: str | None = None
    is_virtual: bool = False   # computed from a series, not stored


def _key(day: str, time_start: str | None, title: str) -> tuple[str, str, str]:
    return day, time_start or "", title.strip().lower()


def _occurrence(appt: Appointment, day: str, is_virtual: bool) -> Occurrence:
    return Occurrence(
        date=day,
        title=appt.title,
        appointment_id=appt.id,
        time_start=appt.time_start,
        time_end=appt.time_end,
        rrule=appt.rrule,
        is_virtual=is_virtual,
    )


def merge_occurrences(
    one_offs: list[Appointment],
    series: list[Appointment],
    window_start: str,
    window_end: str,
    include_series: bool = True,
) -> list[Occurrence]:
    """Combine stored one-offs with expanded series instances.

    Without include_series only stored rows are listed (a series shows up
    on its anchor date alone). Sorted by date, start time, then title.
    """
    listed = [
        _occurrence(a, a.date, is_virtual=False)
        for a in one_offs
        if window_start <= a.date <= window_end
    ]
    taken = {_key(o.date, o.time_start, o.title) for o in listed}

    for appt in series:
        if include_series:
            days = expand(appt.rrule, appt.date, window_start, window_end)
        else:
            days = [appt.date] if window_start <= appt.date <= window_end else []
        for day in days:
            key = _key(day, appt.time_start, appt.title)
            if key in taken:
                logger.debug("Series #%d on %s overridden by a one-off", appt.id, day)
                continue
            taken.add(key)
            listed.append(_occurrence(appt, day, is_virtual=day != appt.date))

    listed.sort(key=lambda o: (o.date, o.time_start or "", o.title))
    return listed


def list_appointments(
    store: AppointmentStore,
    user_id: int,
    date_from: date | str,
    date_to: date | str,
    include_series: bool = True,
) -> list[Occurrence]:
    """List a user's appointments in [date_from, date_to], both inclusive."""
    start = to_date(date_from).isoformat()
    end = to_date(date_to).isoformat()
    if start > end:
        return []

    one_offs = store.list_one_offs(user_id, start, end)
    series = store.list_series(user_id, end)
    return merge_occurrences(one_offs, series, start, end, include_series)
