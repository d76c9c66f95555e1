"""
Journal Ripples — Ripple Lifecycle Manager.

Owns the review state machines:

    Ripple:        pending -> approved (terminal) | pending -> dismissed (terminal)
    SuggestedTask: pending -> accepted (terminal) | pending -> rejected (terminal)

Approving a ripple materializes exactly one Task, Appointment or
ImportantEvent (chosen by the ripple's type) and links it back. Every
transition is a compare-and-set on `status = 'pending'`, so a stale or
concurrent second call is reported as a ReviewConflictError and never
creates a second entity.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ripples.config import settings
from ripples.core.clusters import suggest_clusters
from ripples.core.extractor import TASK_LIKE_TYPES, analyze_priority
from ripples.ports.storage_port import StorageError

if TYPE_CHECKING:
    from ripples.core.extractor import Candidate
    from ripples.data.models import JournalEntry, Ripple, SuggestedTask, Task
    from ripples.ports.storage_port import (
        AppointmentStore,
        ImportantEventStore,
        RippleStore,
        SuggestedTaskStore,
        TaskStore,
    )

logger = logging.getLogger(__name__)


class RippleNotFoundError(Exception):
    """Raised when a ripple or suggestion id is unknown or owned by someone else."""


class ReviewConflictError(Exception):
    """Raised when a review action targets an item that is no longer pending."""

    def __init__(self, kind: str, item_id: int, status: str) -> None:
        super().__init__(f"{kind} #{item_id} is already {status}")
        self.item_id = item_id
        self.status = status


class RippleService:
    """Create, review and clear ripples and their suggested-task drafts."""

    def __init__(
        self,
        ripples: RippleStore,
        suggestions: SuggestedTaskStore,
        tasks: TaskStore,
        appointments: AppointmentStore,
        events: ImportantEventStore,
    ) -> None:
        self._ripples = ripples
        self._suggestions = suggestions
        self._tasks = tasks
        self._appointments = appointments
        self._events = events

    # ------------------------------------------------------------------
    # Creation / regeneration
    # ------------------------------------------------------------------

    def create_for_entry(self, entry: JournalEntry, candidates: list[Candidate]) -> list[Ripple]:
        """Insert one ripple per candidate, plus a draft for task-like ones.

        Rows are inserted one at a time; a row that conflicts or fails is
        logged and skipped while the rest are kept.
        """
        created: list[Ripple] = []
        for candidate in candidates:
            try:
                ripple = self._ripples.add_ripple(
                    user_id=entry.user_id,
                    entry_id=entry.id,
                    entry_date=entry.date,
                    text=candidate.text,
                    original_context=candidate.original_context,
                    type=candidate.type,
                    confidence=candidate.confidence,
                    confidence_band=candidate.confidence_band,
                    due_date=candidate.due_date,
                    time_start=candidate.time_start,
                    rrule=candidate.rrule,
                    calendar_title=candidate.calendar_title,
                    cluster=entry.cluster or None,
                )
            except StorageError as exc:
                logger.warning("Ripple insert failed for entry #%d: %s", entry.id, exc)
                continue
            if ripple is None:
                continue
            created.append(ripple)

            if candidate.type in TASK_LIKE_TYPES:
                self._add_suggestion(entry, candidate, ripple)

        logger.info(
            "Entry #%d: %d of %d candidates stored as ripples",
            entry.id, len(created), len(candidates),
        )
        return created

    def _add_suggestion(self, entry: JournalEntry, candidate: Candidate, ripple: Ripple) -> None:
        cluster = entry.cluster or next(iter(suggest_clusters(candidate.original_context)), None)
        try:
            self._suggestions.add_suggestion(
                user_id=entry.user_id,
                source_ripple_id=ripple.id,
                title=ripple.text,
                priority=candidate.priority or settings.DEFAULT_PRIORITY,
                due_date=candidate.due_date,
                repeat=candidate.repeat_label,
                rrule=candidate.rrule,
                cluster=cluster,
            )
        except StorageError as exc:
            logger.warning("Suggested task insert failed for ripple #%d: %s", ripple.id, exc)

    def clear_for_entry(self, user_id: int, entry_id: int) -> int:
        """Delete every ripple of an entry (any status) and its drafts.

        Materialized tasks, appointments and events are left untouched.
        """
        ripple_ids = [r.id for r in self._ripples.list_for_entry(user_id, entry_id)]
        self._suggestions.delete_for_ripples(ripple_ids)
        deleted = self._ripples.delete_for_entry(user_id, entry_id)
        if deleted:
            logger.info("Cleared %d ripples for entry #%d", deleted, entry_id)
        return deleted

    def regenerate_for_entry(
        self, entry: JournalEntry, candidates: list[Candidate],
    ) -> list[Ripple]:
        """Replace an entry's ripples wholesale; prior review decisions are dropped."""
        self.clear_for_entry(entry.user_id, entry.id)
        return self.create_for_entry(entry, candidates)

    # ------------------------------------------------------------------
    # Ripple review
    # ------------------------------------------------------------------

    def list_for_date(
        self,
        user_id: int,
        date: str,
        status: str | None = "pending",
        cluster: str | None = None,
    ) -> list[Ripple]:
        return self._ripples.list_for_date(user_id, date, status=status, cluster=cluster)

    def _owned_ripple(self, user_id: int, ripple_id: int) -> Ripple:
        ripple = self._ripples.get_ripple(ripple_id)
        if ripple is None or ripple.user_id != user_id:
            raise RippleNotFoundError(f"Ripple #{ripple_id} not found")
        return ripple

    def _claim(self, ripple: Ripple, to_status: str) -> None:
        if not self._ripples.transition(ripple.id, ripple.user_id, "pending", to_status):
            current = self._ripples.get_ripple(ripple.id)
            status = current.status if current else "deleted"
            raise ReviewConflictError("Ripple", ripple.id, status)

    def approve(
        self,
        user_id: int,
        ripple_id: int,
        cluster: str | None = None,
        due_date: str | None = None,
    ) -> Ripple:
        """Approve a pending ripple and materialize its entity.

        The due date is the override, else the resolved date, else the
        entry's own date. If materialization fails the ripple goes back to
        pending and the error propagates.
        """
        ripple = self._owned_ripple(user_id, ripple_id)
        self._claim(ripple, "approved")

        due = due_date or ripple.due_date or ripple.entry_date
        final_cluster = cluster or ripple.cluster
        try:
            links = self._materialize(ripple, due, final_cluster)
            self._ripples.set_links(ripple.id, due_date=due, cluster=final_cluster, **links)
        except Exception:
            self._ripples.transition(ripple.id, user_id, "approved", "pending")
            logger.warning("Approval of ripple #%d rolled back", ripple.id)
            raise

        logger.info("Ripple #%d approved (%s)", ripple.id, ", ".join(
            f"{k}={v}" for k, v in links.items()
        ))
        return self._owned_ripple(user_id, ripple_id)

    def _materialize(self, ripple: Ripple, due: str, cluster: str | None) -> dict[str, int]:
        if ripple.type in TASK_LIKE_TYPES:
            task = self._tasks.add_task(
                user_id=ripple.user_id,
                title=ripple.text,
                due_date=due,
                priority=analyze_priority(ripple.original_context) or settings.DEFAULT_PRIORITY,
                rrule=ripple.rrule,
                cluster=cluster,
                source_ripple_id=ripple.id,
            )
            return {"task_id": task.id}
        if ripple.type == "appointment":
            appointment = self._appointments.upsert_appointment(
                user_id=ripple.user_id,
                title=ripple.calendar_title or ripple.text,
                date=due,
                time_start=ripple.time_start,
                details=ripple.original_context,
                rrule=ripple.rrule,
                cluster=cluster,
                entry_id=ripple.entry_id,
                source_ripple_id=ripple.id,
            )
            return {"appointment_id": appointment.id}
        if ripple.type == "importantEvent":
            event = self._events.upsert_event(
                user_id=ripple.user_id,
                title=ripple.calendar_title or ripple.text,
                date=due,
                details=ripple.original_context,
                cluster=cluster,
                source_ripple_id=ripple.id,
            )
            return {"important_event_id": event.id}
        raise ValueError(f"Unknown ripple type: {ripple.type!r}")

    def dismiss(self, user_id: int, ripple_id: int) -> Ripple:
        ripple = self._owned_ripple(user_id, ripple_id)
        self._claim(ripple, "dismissed")
        logger.info("Ripple #%d dismissed", ripple.id)
        return self._owned_ripple(user_id, ripple_id)

    # ------------------------------------------------------------------
    # Suggested-task review
    # ------------------------------------------------------------------

    def list_suggested(self, user_id: int, status: str = "pending") -> list[SuggestedTask]:
        return self._suggestions.list_by_status(user_id, status)

    def _owned_suggestion(self, user_id: int, suggestion_id: int) -> SuggestedTask:
        suggestion = self._suggestions.get_suggestion(suggestion_id)
        if suggestion is None or suggestion.user_id != user_id:
            raise RippleNotFoundError(f"Suggested task #{suggestion_id} not found")
        return suggestion

    def _claim_suggestion(self, suggestion: SuggestedTask, to_status: str) -> None:
        if not self._suggestions.transition(
            suggestion.id, suggestion.user_id, "pending", to_status,
        ):
            current = self._suggestions.get_suggestion(suggestion.id)
            status = current.status if current else "deleted"
            raise ReviewConflictError("Suggested task", suggestion.id, status)

    def accept_suggested(
        self, user_id: int, suggestion_id: int, due_date: str | None = None,
    ) -> Task:
        """Turn a pending draft into a Task, whatever its ripple's status."""
        suggestion = self._owned_suggestion(user_id, suggestion_id)
        self._claim_suggestion(suggestion, "accepted")
        try:
            task = self._tasks.add_task(
                user_id=user_id,
                title=suggestion.title,
                due_date=due_date or suggestion.due_date,
                priority=suggestion.priority,
                rrule=suggestion.rrule,
                cluster=suggestion.cluster,
                source_ripple_id=suggestion.source_ripple_id,
            )
            self._suggestions.set_task(suggestion.id, task.id)
        except Exception:
            self._suggestions.transition(suggestion.id, user_id, "accepted", "pending")
            logger.warning("Acceptance of suggested task #%d rolled back", suggestion.id)
            raise

        logger.info("Suggested task #%d accepted as task #%d", suggestion.id, task.id)
        return task

    def reject_suggested(self, user_id: int, suggestion_id: int) -> SuggestedTask:
        suggestion = self._owned_suggestion(user_id, suggestion_id)
        self._claim_suggestion(suggestion, "rejected")
        logger.info("Suggested task #%d rejected", suggestion.id)
        return self._owned_suggestion(user_id, suggestion_id)
