"""
Journal Ripples — Lexicon.

Every word list and pattern table the extractor, sieve and cluster suggester
consult lives here, bundled into one immutable Lexicon object. Callers pass a
Lexicon in (or get the default), so tests can swap in their own tables.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import cached_property, lru_cache

_FLAGS = re.IGNORECASE

_WEEKDAY_OR_UNIT = (
    r"monday|tuesday|wednesday|thursday|friday|saturday|sunday|day|week|month|year"
)

# Sentence body: everything up to a terminator or a line break.
_FRAGMENT = r"[^.!?\n]+"


ACTION_VERBS: tuple[str, ...] = (
    "buy", "call", "email", "text", "message",
    "schedule", "book", "attend",
    "clean", "wash", "wipe", "vacuum", "mop", "water", "feed",
    "pay", "renew", "submit", "file", "send", "print", "scan",
    "write", "read", "finish", "fix", "update", "check", "review",
    "install", "uninstall", "replace",
    "pick up", "drop off", "prepare", "plan", "organize", "record",
    "meet", "visit",
    "practice", "backup", "back up",
)

BORING_WORDS: frozenset[str] = frozenset(
    {"day", "today", "tomorrow", "sometime", "later", "soon", "now", "please"}
)

FILLER_PATTERNS: tuple[str, ...] = (
    r"\bidk\b",
    r"\bsomething\b",
    r"\blet['’]s see\b",
    r"\bthat'?s at least\b",
    r"\bwell(,|\s)",
    r"\byeah\b",
    r"\bdramatique\b",
    r"\bsemi-?functional\b",
    r"^\s*(hmm+|uh+|erm)\b",
)

TASK_PATTERNS: tuple[str, ...] = (
    r"\b(?:I\s+(?:need to|should|have to|want to|gotta)"
    r"|need to|should|have to|want to|gotta"
    r"|remember to|don['’]t forget to)\s+(" + _FRAGMENT + r")",
    r"\b(?:probably|maybe|might)\s+(?:should|need to|have to)\s+(" + _FRAGMENT + r")",
)

RECURRING_PATTERNS: tuple[str, ...] = (
    r"\b(?:every|each)\s+(" + _WEEKDAY_OR_UNIT + r")\b\s*"
    r"(?:(?:I|we)\s+)?(?:(?:need to|should|have to)\s+)?(" + _FRAGMENT + r")",
)

APPOINTMENT_PATTERNS: tuple[str, ...] = (
    r"\b(?:meeting|appointment|call|lunch|dinner)\s+(?:with\s+)?"
    r"([^.!?\n]+?)\s+(?:at|on)\s+(" + _FRAGMENT + r")",
)

PRIORITY_PATTERNS: tuple[tuple[str, str], ...] = (
    ("high", r"\b(?:critical|urgent|important|priority|must|essential|crucial|vital"
             r"|asap|immediately|right away)\b"),
    ("medium", r"\b(?:should|ought to|need to|have to|want to|would like to)\b"),
    ("low", r"\b(?:maybe|perhaps|might|could|someday|eventually)\b"),
)

KNOWN_CLUSTERS: tuple[str, ...] = (
    "home", "work", "games", "crochet", "spiritual", "health", "finance",
)

CLUSTER_HINTS: dict[str, tuple[str, ...]] = {
    "home": ("laundry", "dishes", "kitchen", "declutter", "trash", "clean"),
    "work": ("client", "deploy", "merge", "ticket", "resume", "interview"),
    "health": ("meds", "doctor", "dentist", "exercise", "gym", "sleep", "medication"),
    "finance": ("budget", "rent", "bill", "invoice", "payment"),
    "games": ("steam", "switch", "game", "quest", "level"),
    "crochet": ("crochet", "yarn", "stitch", "pattern", "hook"),
}


def _compile(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, _FLAGS) for p in patterns)


@dataclass(frozen=True)
class Lexicon:
    """Immutable bundle of word lists and compiled patterns.

    Single-word verbs match with optional -e/-ed/-es/-ing suffixes; verbs
    containing a space match literally.
    """

    action_verbs: tuple[str, ...] = ACTION_VERBS
    boring_words: frozenset[str] = BORING_WORDS
    filler_patterns: tuple[re.Pattern[str], ...] = field(
        default_factory=lambda: _compile(FILLER_PATTERNS)
    )
    task_patterns: tuple[re.Pattern[str], ...] = field(
        default_factory=lambda: _compile(TASK_PATTERNS)
    )
    recurring_patterns: tuple[re.Pattern[str], ...] = field(
        default_factory=lambda: _compile(RECURRING_PATTERNS)
    )
    appointment_patterns: tuple[re.Pattern[str], ...] = field(
        default_factory=lambda: _compile(APPOINTMENT_PATTERNS)
    )
    priority_patterns: tuple[tuple[str, re.Pattern[str]], ...] = field(
        default_factory=lambda: tuple(
            (level, re.compile(p, _FLAGS)) for level, p in PRIORITY_PATTERNS
        )
    )
    known_clusters: tuple[str, ...] = KNOWN_CLUSTERS
    cluster_hints: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(CLUSTER_HINTS)
    )

    @cached_property
    def verb_patterns(self) -> tuple[re.Pattern[str], ...]:
        """Compile whole-word matchers for the verb list, phrases first."""
        phrases = [v for v in self.action_verbs if " " in v]
        words = [v for v in self.action_verbs if " " not in v]
        compiled = [re.compile(rf"\b{re.escape(v)}\b", _FLAGS) for v in phrases]
        compiled += [
            re.compile(rf"\b{re.escape(v)}(?:e|ed|es|ing)?\b", _FLAGS) for v in words
        ]
        return tuple(compiled)


@lru_cache(maxsize=1)
def default_lexicon() -> Lexicon:
    """Return the built-in lexicon, constructed once."""
    return Lexicon()
