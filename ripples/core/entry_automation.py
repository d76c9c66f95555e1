"""
Journal Ripples — Entry Automation Orchestrator.

Hooks the entry collaborator calls after saving a journal entry:

    on_entry_created  -> normalize -> dated upserts -> extract/sieve/enrich -> ripples
    on_entry_updated  -> same, but only when the text (or journal date) changed,
                         and ripples are regenerated from scratch
    on_entry_deleted  -> drop the entry's ripples and drafts

Every stage is isolated: a failure is logged, recorded on the result and
the remaining stages still run. Nothing here can make an entry save fail.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, TypeVar

from ripples.config import settings
from ripples.core.extractor import Candidate, extract_candidates
from ripples.core.normalize import dedupe_tags, normalize_date, normalize_hhmm, plain_text_from
from ripples.core.sieve import sieve_candidates
from ripples.core.temporal import DateMention, extract_dates, parse_recurrence

if TYPE_CHECKING:
    from ripples.core.lexicon import Lexicon
    from ripples.core.ripple_service import RippleService
    from ripples.data.models import Appointment, ImportantEvent, JournalEntry, Ripple
    from ripples.ports.storage_port import AppointmentStore, ImportantEventStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _calendar_title(
    candidate: Candidate, due_date: str | None, entry_mentions: list[DateMention],
) -> str | None:
    context = candidate.original_context.lower()
    for mention in entry_mentions:
        if mention.date == due_date and mention.phrase.lower() in context:
            return mention.title
    return None


def enrich_candidate(
    candidate: Candidate,
    reference: str,
    entry_mentions: list[DateMention] | None = None,
) -> Candidate:
    """Attach due date, time and recurrence to a sieved candidate.

    Recurring and appointment candidates get a rule (and its next date) when
    their context names a cadence; any candidate gets the first explicit
    date/time in its text. An appointment with a date but no time and no
    cadence becomes an all-day importantEvent.

    entry_mentions are the date mentions of the whole entry text. A dated
    appointment or event takes the title of the mention it came from, so
    approving it finds the calendar item the entry already created.
    """
    updates: dict[str, object] = {}

    if candidate.type in ("recurringTask", "appointment"):
        match = parse_recurrence(candidate.original_context, reference)
        if match is not None:
            updates.update(
                rrule=match.rrule,
                repeat_label=match.label,
                due_date=match.next_date,
            )

    mentions = extract_dates(candidate.text, reference)
    if mentions:
        first = mentions[0]
        if updates.get("due_date") is None:
            updates["due_date"] = first.date
        if first.time_start:
            updates["time_start"] = first.time_start
        elif candidate.type == "appointment" and "rrule" not in updates:
            updates["type"] = "importantEvent"

    if entry_mentions and updates.get("type", candidate.type) in ("appointment", "importantEvent"):
        title = _calendar_title(candidate, updates.get("due_date"), entry_mentions)
        if title:
            updates["calendar_title"] = title

    return candidate.model_copy(update=updates) if updates else candidate


def analyze_text(
    text: str,
    reference: str,
    lexicon: Lexicon | None = None,
    max_suggestions: int | None = None,
) -> list[Candidate]:
    """Extract, sieve, de-duplicate by text, cap and enrich candidates.

    Pure: the same text and reference date always give the same list.
    """
    kept = sieve_candidates(extract_candidates(text, lexicon), lexicon)

    seen: set[str] = set()
    unique: list[Candidate] = []
    for candidate in kept:
        key = candidate.text.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(candidate)

    capped = unique[: max_suggestions or settings.MAX_SUGGESTIONS]
    mentions = extract_dates(text, reference) if capped else []
    return [enrich_candidate(c, reference, mentions) for c in capped]


@dataclass
class AutomationResult:
    """What one hook invocation did."""

    entry_id: int
    candidates: list[Candidate] = field(default_factory=list)
    ripples: list[Ripple] = field(default_factory=list)
    appointments: list[Appointment] = field(default_factory=list)
    events: list[ImportantEvent] = field(default_factory=list)
    cleared: int = 0
    failed_stages: list[str] = field(default_factory=list)
    skipped: bool = False    # update without a text/date change

    @property
    def ok(self) -> bool:
        return not self.failed_stages


class EntryAutomation:
    """Runs the ripple pipeline for journal entry lifecycle events."""

    def __init__(
        self,
        service: RippleService,
        appointments: AppointmentStore,
        events: ImportantEventStore,
        lexicon: Lexicon | None = None,
        max_suggestions: int | None = None,
        timezone: str | None = None,
    ) -> None:
        self._service = service
        self._appointments = appointments
        self._events = events
        self._lexicon = lexicon
        self._max_suggestions = max_suggestions or settings.MAX_SUGGESTIONS
        self._timezone = timezone or settings.TIMEZONE

    # ------------------------------------------------------------------
    # Pure analysis
    # ------------------------------------------------------------------

    def normalize(self, entry: JournalEntry) -> JournalEntry:
        """Copy of the entry with plain text, an ISO date and clean tags."""
        return replace(
            entry,
            text=plain_text_from(entry.text, entry.html, entry.content),
            date=normalize_date(entry.date, self._timezone),
            tags=dedupe_tags(entry.tags),
        )

    def analyze(self, entry: JournalEntry) -> list[Candidate]:
        """Candidates the pipeline would store for this entry; no storage is touched."""
        return analyze_text(
            plain_text_from(entry.text, entry.html, entry.content),
            normalize_date(entry.date, self._timezone),
            lexicon=self._lexicon,
            max_suggestions=self._max_suggestions,
        )

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _stage(
        self, result: AutomationResult, name: str, fn: Callable[..., T], *args: object,
    ) -> T | None:
        try:
            return fn(*args)
        except Exception as exc:
            logger.warning("Entry #%d: %s stage failed: %s", result.entry_id, name, exc)
            result.failed_stages.append(name)
            return None

    def _upsert_dated_items(self, entry: JournalEntry, result: AutomationResult) -> None:
        """Create appointments (timed) or important events (all-day) for dated phrases."""
        for mention in extract_dates(entry.text, entry.date):
            title = mention.title.strip()
            if not title:
                continue
            time_start = normalize_hhmm(mention.time_start)
            if time_start:
                result.appointments.append(self._appointments.upsert_appointment(
                    user_id=entry.user_id,
                    title=title,
                    date=mention.date,
                    time_start=time_start,
                    cluster=entry.cluster or None,
                    entry_id=entry.id,
                ))
            else:
                result.events.append(self._events.upsert_event(
                    user_id=entry.user_id,
                    title=title,
                    date=mention.date,
                    cluster=entry.cluster or None,
                ))

    def on_entry_created(self, entry: JournalEntry) -> AutomationResult:
        result = AutomationResult(entry_id=entry.id)
        normalized = self._stage(result, "normalize", self.normalize, entry)
        if normalized is None:
            return result
        if not normalized.text:
            return result

        self._stage(result, "dates", self._upsert_dated_items, normalized, result)
        candidates = self._stage(result, "analyze", self.analyze, normalized)
        if candidates:
            result.candidates = candidates
            ripples = self._stage(
                result, "ripples", self._service.create_for_entry, normalized, candidates,
            )
            result.ripples = ripples or []
        return result

    def on_entry_updated(self, entry: JournalEntry, previous: JournalEntry) -> AutomationResult:
        """Re-analyze only when the plain text or journal date changed.

        When it did, the entry's ripples are regenerated from scratch; prior
        approvals and dismissals for this entry are discarded.
        """
        result = AutomationResult(entry_id=entry.id)
        normalized = self._stage(result, "normalize", self.normalize, entry)
        before = self._stage(result, "normalize", self.normalize, previous)
        if normalized is None or before is None:
            return result

        if normalized.text == before.text and normalized.date == before.date:
            logger.debug("Entry #%d: no text change, skipping re-analysis", entry.id)
            result.skipped = True
            return result

        if normalized.text:
            self._stage(result, "dates", self._upsert_dated_items, normalized, result)
        candidates = self._stage(result, "analyze", self.analyze, normalized) or []
        result.candidates = candidates
        ripples = self._stage(
            result, "ripples", self._service.regenerate_for_entry, normalized, candidates,
        )
        result.ripples = ripples or []
        return result

    def on_entry_deleted(self, user_id: int, entry_id: int) -> AutomationResult:
        """Drop derived ripples and drafts; materialized entities survive."""
        result = AutomationResult(entry_id=entry_id)
        cleared = self._stage(result, "clear", self._service.clear_for_entry, user_id, entry_id)
        result.cleared = cleared or 0
        return result
