"""
Journal Ripples — Actionability Sieve.

Rejects vague chatter. Keeps only text that is long enough, free of filler,
and contains a real action verb from the lexicon.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Literal

from ripples.core.lexicon import Lexicon, default_lexicon

if TYPE_CHECKING:
    from ripples.core.extractor import Candidate

logger = logging.getLogger(__name__)

Verdict = Literal["junk", "no-verb", "ok"]

_LETTER_RE = re.compile(r"[A-Za-zÀ-ɏ]")
_PUNCT_RE = re.compile(r"[.,!?…]")


def looks_like_junk(text: str, lexicon: Lexicon | None = None) -> bool:
    """Apply rejection rules 1-5: empty, boring word, short, filler, noisy."""
    lexicon = lexicon or default_lexicon()
    s = (text or "").strip()
    if not s:
        return True
    if not re.search(r"\s", s) and s.lower() in lexicon.boring_words:
        return True
    if len(s) < 6:
        return True
    if any(p.search(s) for p in lexicon.filler_patterns):
        return True
    letters = len(_LETTER_RE.findall(s))
    punct = len(_PUNCT_RE.findall(s))
    if letters < 8 or punct > letters / 2:
        return True
    return False


def has_action_verb(text: str, lexicon: Lexicon | None = None) -> bool:
    lexicon = lexicon or default_lexicon()
    return any(p.search(text or "") for p in lexicon.verb_patterns)


def why_reject(text: str, lexicon: Lexicon | None = None) -> Verdict:
    """Explain the sieve's decision for one piece of text."""
    if looks_like_junk(text, lexicon):
        return "junk"
    if not has_action_verb(text, lexicon):
        return "no-verb"
    return "ok"


def is_actionable(text: str, lexicon: Lexicon | None = None) -> bool:
    return why_reject(text, lexicon) == "ok"


def sieve_candidates(
    candidates: list[Candidate], lexicon: Lexicon | None = None,
) -> list[Candidate]:
    """Keep only candidates whose text passes the sieve, preserving order."""
    kept: list[Candidate] = []
    for candidate in candidates:
        verdict = why_reject(candidate.text, lexicon)
        if verdict == "ok":
            kept.append(candidate)
        else:
            logger.debug("Sieve rejected %r (%s)", candidate.text, verdict)
    return kept
