"""
Journal Ripples — Cluster suggester.

Guesses which life-area clusters ("home", "work", ...) a piece of text
belongs to. Explicit markers win first: hashtags (#work), bracketed tags
([games]) and preposition cues ("for home", "about finance"). After that a
cluster is suggested only when at least two of its hint keywords appear.
"""

from __future__ import annotations

import re

from ripples.core.lexicon import Lexicon, default_lexicon

_HASHTAG_RE = re.compile(r"(?:^|\s)#([a-z0-9_-]{2,30})\b", re.IGNORECASE)
_BRACKET_RE = re.compile(r"[\[{]([a-z0-9 _-]{2,30})[\]}]", re.IGNORECASE)

MIN_HINT_HITS = 2


def suggest_clusters(text: str | None, lexicon: Lexicon | None = None) -> list[str]:
    """Return lower-case cluster ids in discovery order, without duplicates."""
    lexicon = lexicon or default_lexicon()
    src = text or ""
    found: dict[str, None] = {}

    for m in _HASHTAG_RE.finditer(src):
        found[m.group(1).lower()] = None
    for m in _BRACKET_RE.finditer(src):
        found[re.sub(r"\s+", "-", m.group(1).strip().lower())] = None

    for cluster in lexicon.known_clusters:
        cue = rf"\b(?:for|in|re:|about)\s+{re.escape(cluster)}\b"
        if re.search(cue, src, re.IGNORECASE):
            found[cluster.lower()] = None

    for cluster, words in lexicon.cluster_hints.items():
        hits = sum(
            1 for word in words
            if re.search(rf"\b{re.escape(word)}\b", src, re.IGNORECASE)
        )
        if hits >= MIN_HINT_HITS:
            found[cluster] = None

    return list(found)
