"""Storage ports — what the ripple core needs from persistence.

Core modules depend on these protocols, never on SQLite directly.
"""

from __future__ import annotations

from typing import Protocol

from ripples.data.models import (
    Appointment,
    ImportantEvent,
    Ripple,
    SuggestedTask,
    Task,
)


class StorageError(Exception):
    """Raised when a store operation fails for reasons other than a duplicate."""


class RippleStore(Protocol):
    def add_ripple(
        self,
        user_id: int,
        entry_id: int,
        entry_date: str,
        text: str,
        original_context: str,
        type: str,
        confidence: float = 0.5,
        confidence_band: str = "medium",
        due_date: str | None = None,
        time_start: str | None = None,
        rrule: str | None = None,
        calendar_title: str | None = None,
        cluster: str | None = None,
    ) -> Ripple | None: ...

    def get_ripple(self, ripple_id: int) -> Ripple | None: ...

    def list_for_entry(self, user_id: int, entry_id: int) -> list[Ripple]: ...

    def list_for_date(
        self,
        user_id: int,
        entry_date: str,
        status: str | None = "pending",
        cluster: str | None = None,
    ) -> list[Ripple]: ...

    def transition(
        self,
        ripple_id: int,
        user_id: int,
        from_status: str,
        to_status: str,
    ) -> bool: ...

    def set_links(
        self,
        ripple_id: int,
        due_date: str | None = None,
        cluster: str | None = None,
        task_id: int | None = None,
        appointment_id: int | None = None,
        important_event_id: int | None = None,
    ) -> None: ...

    def delete_for_entry(self, user_id: int, entry_id: int) -> int: ...


class SuggestedTaskStore(Protocol):
    def add_suggestion(
        self,
        user_id: int,
        source_ripple_id: int,
        title: str,
        priority: str = "low",
        due_date: str | None = None,
        repeat: str | None = None,
        rrule: str | None = None,
        cluster: str | None = None,
    ) -> SuggestedTask | None: ...

    def get_suggestion(self, suggestion_id: int) -> SuggestedTask | None: ...

    def list_by_status(self, user_id: int, status: str = "pending") -> list[SuggestedTask]: ...

    def transition(
        self, suggestion_id: int, user_id: int, from_status: str, to_status: str,
    ) -> bool: ...

    def set_task(self, suggestion_id: int, task_id: int) -> None: ...

    def delete_for_ripples(self, ripple_ids: list[int]) -> int: ...


class TaskStore(Protocol):
    def add_task(
        self,
        user_id: int,
        title: str,
        due_date: str | None = None,
        priority: str = "low",
        rrule: str | None = None,
        cluster: str | None = None,
        source_ripple_id: int | None = None,
    ) -> Task: ...

    def get_task(self, task_id: int) -> Task | None: ...

    def list_for_user(self, user_id: int) -> list[Task]: ...


class AppointmentStore(Protocol):
    def upsert_appointment(
        self,
        user_id: int,
        title: str,
        date: str,
        time_start: str | None = None,
        time_end: str | None = None,
        location: str = "",
        details: str = "",
        rrule: str | None = None,
        cluster: str | None = None,
        entry_id: int | None = None,
        source_ripple_id: int | None = None,
    ) -> Appointment: ...

    def get_appointment(self, appointment_id: int) -> Appointment | None: ...

    def list_one_offs(self, user_id: int, date_from: str, date_to: str) -> list[Appointment]: ...

    def list_series(self, user_id: int, date_to: str) -> list[Appointment]: ...


class ImportantEventStore(Protocol):
    def upsert_event(
        self,
        user_id: int,
        title: str,
        date: str,
        details: str = "",
        cluster: str | None = None,
        source_ripple_id: int | None = None,
    ) -> ImportantEvent: ...

    def get_event(self, event_id: int) -> ImportantEvent | None: ...

    def list_for_user(
        self, user_id: int, date_from: str | None = None, date_to: str | None = None,
    ) -> list[ImportantEvent]: ...
