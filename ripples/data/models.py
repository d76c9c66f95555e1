"""
Journal Ripples — Data Models.

Records persisted in SQLite. A JournalEntry is consumed (owned by the entry
collaborator); everything else is written by the ripple pipeline.
Dates are ISO strings (YYYY-MM-DD), times are HH:MM.
"""

from __future__ import annotations

from dataclasses import dataclass, field

RIPPLE_STATUSES = ("pending", "approved", "dismissed")
SUGGESTION_STATUSES = ("pending", "accepted", "rejected")


@dataclass
class JournalEntry:
    """A journal entry as handed to the automation hooks."""

    id: int
    user_id: int
    date: str = ""
    text: str = ""
    html: str = ""
    content: str = ""
    mood: str = ""
    tags: list[str] = field(default_factory=list)
    cluster: str = ""


@dataclass
class Ripple:
    """A reviewable action candidate extracted from one journal entry.

    Status only moves pending -> approved or pending -> dismissed.
    """

    id: int
    user_id: int
    entry_id: int
    entry_date: str
    text: str                          # e.g. "send the slides this Friday"
    original_context: str              # verbatim matched span
    type: str                          # task | recurringTask | appointment | importantEvent
    confidence: float = 0.5
    confidence_band: str = "medium"
    status: str = "pending"
    due_date: str | None = None
    time_start: str | None = None
    rrule: str | None = None           # e.g. "FREQ=WEEKLY;BYDAY=FR"
    calendar_title: str | None = None  # title of the dated calendar item it matches
    cluster: str | None = None
    task_id: int | None = None
    appointment_id: int | None = None
    important_event_id: int | None = None
    created_at: str = ""


@dataclass
class SuggestedTask:
    """A task draft paired with a task-like ripple; reviewed independently."""

    id: int
    user_id: int
    source_ripple_id: int
    title: str
    priority: str = "low"
    due_date: str | None = None
    repeat: str | None = None          # display label, e.g. "Every FR"
    rrule: str | None = None
    cluster: str | None = None
    status: str = "pending"
    task_id: int | None = None
    created_at: str = ""


@dataclass
class Task:
    id: int
    user_id: int
    title: str
    due_date: str | None = None
    priority: str = "low"
    rrule: str | None = None
    cluster: str | None = None
    completed: bool = False
    source_ripple_id: int | None = None
    created_at: str = ""


@dataclass
class Appointment:
    """A calendar appointment. With an rrule, `date` is the series anchor."""

    id: int
    user_id: int
    title: str
    date: str
    time_start: str | None = None
    time_end: str | None = None
    location: str = ""
    details: str = ""
    rrule: str | None = None
    cluster: str | None = None
    entry_id: int | None = None
    source_ripple_id: int | None = None
    created_at: str = ""


@dataclass
class ImportantEvent:
    id: int
    user_id: int
    title: str
    date: str
    details: str = ""
    cluster: str | None = None
    source_ripple_id: int | None = None
    created_at: str = ""
