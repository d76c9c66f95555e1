"""
Journal Ripples — Action Candidate Extractor.

Scans plain journal text with three independent pattern groups (task phrasing,
recurring-task phrasing, appointment phrasing) and returns the matches as
Candidate objects. Pure: the output depends only on the text and the lexicon.
"""

from __future__ import annotations

import logging
import re
from typing import Literal

from pydantic import BaseModel, Field

from ripples.core.lexicon import Lexicon, default_lexicon

logger = logging.getLogger(__name__)

CandidateType = Literal["task", "recurringTask", "appointment", "importantEvent"]

TASK_LIKE_TYPES = frozenset({"task", "recurringTask"})


class Candidate(BaseModel):
    """An unpersisted extraction result.

    Extraction fills the text/context/type/confidence fields; the temporal
    enrichment step in the orchestrator fills due_date, time_start, rrule,
    repeat_label and calendar_title.
    """

    text: str
    original_context: str
    type: CandidateType
    confidence: float = Field(ge=0.0, le=1.0)
    confidence_band: Literal["high", "medium", "low"]
    priority: str | None = None

    # Appointment groups
    counterpart: str | None = None
    when_phrase: str | None = None
    # Recurring cadence word, e.g. "friday" or "week"
    cadence: str | None = None

    # Temporal enrichment
    due_date: str | None = None      # ISO YYYY-MM-DD
    time_start: str | None = None    # HH:MM
    rrule: str | None = None
    repeat_label: str | None = None
    # Title of the dated appointment/event the entry text itself produces
    calendar_title: str | None = None


def calculate_confidence(context: str, fragment: str) -> float:
    """Score a match from its wording and the length of the captured fragment."""
    span = context.lower()
    score = 0.5
    if "need to" in span or "must" in span:
        score += 0.3
    if "urgent" in span or "important" in span:
        score += 0.2
    if "maybe" in span or "might" in span:
        score -= 0.2
    length = len(fragment.strip())
    if length > 20:
        score += 0.1
    if length < 5:
        score -= 0.2
    return round(max(0.1, min(1.0, score)), 2)


def confidence_band(score: float) -> Literal["high", "medium", "low"]:
    if score >= 0.75:
        return "high"
    if score >= 0.5:
        return "medium"
    return "low"


def analyze_priority(text: str, lexicon: Lexicon | None = None) -> str | None:
    """Return the first priority level whose pattern matches, highest first."""
    lexicon = lexicon or default_lexicon()
    for level, pattern in lexicon.priority_patterns:
        if pattern.search(text):
            return level
    return None


def _clean(fragment: str) -> str:
    return re.sub(r"\s+", " ", fragment).strip(" \t,;:-")


def _make(
    text: str,
    context: str,
    ctype: CandidateType,
    fragment: str,
    lexicon: Lexicon,
    **extra: str | None,
) -> Candidate:
    score = calculate_confidence(context, fragment)
    return Candidate(
        text=text,
        original_context=context,
        type=ctype,
        confidence=score,
        confidence_band=confidence_band(score),
        priority=analyze_priority(context, lexicon),
        **extra,
    )


def _task_candidates(text: str, lexicon: Lexicon) -> list[Candidate]:
    found: list[Candidate] = []
    for pattern in lexicon.task_patterns:
        for match in pattern.finditer(text):
            fragment = _clean(match.group(1))
            if len(fragment) <= 2:
                continue
            context = match.group(0).strip()
            found.append(_make(fragment, context, "task", fragment, lexicon))
    return found


def _recurring_candidates(text: str, lexicon: Lexicon) -> list[Candidate]:
    found: list[Candidate] = []
    for pattern in lexicon.recurring_patterns:
        for match in pattern.finditer(text):
            cadence = match.group(1).lower()
            fragment = _clean(match.group(2))
            if len(fragment) <= 2:
                continue
            context = match.group(0).strip()
            found.append(_make(
                f"{fragment} ({cadence})", context, "recurringTask", fragment,
                lexicon, cadence=cadence,
            ))
    return found


def _appointment_candidates(text: str, lexicon: Lexicon) -> list[Candidate]:
    found: list[Candidate] = []
    for pattern in lexicon.appointment_patterns:
        for match in pattern.finditer(text):
            counterpart = _clean(match.group(1))
            when_phrase = _clean(match.group(2))
            if not counterpart or not when_phrase:
                continue
            context = match.group(0).strip()
            found.append(_make(
                _clean(context), context, "appointment", counterpart, lexicon,
                counterpart=counterpart, when_phrase=when_phrase,
            ))
    return found


def extract_candidates(text: str, lexicon: Lexicon | None = None) -> list[Candidate]:
    """Extract action candidates from plain text.

    Matches from all three groups are pooled in group order (task, recurring,
    appointment) and deduplicated by exact original_context; the first
    occurrence wins. Near-duplicate phrasing is not merged.
    """
    if not text or not text.strip():
        return []
    lexicon = lexicon or default_lexicon()

    pooled = (
        _task_candidates(text, lexicon)
        + _recurring_candidates(text, lexicon)
        + _appointment_candidates(text, lexicon)
    )

    seen: set[str] = set()
    unique: list[Candidate] = []
    for candidate in pooled:
        if candidate.original_context in seen:
            continue
        seen.add(candidate.original_context)
        unique.append(candidate)

    logger.debug("Extracted %d candidates (%d before dedup)", len(unique), len(pooled))
    return unique
