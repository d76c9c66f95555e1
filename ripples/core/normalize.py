"""
Journal Ripples — Entry normalization helpers.

Small, forgiving converters applied to journal entries before analysis:
plain text from text/html/content, ISO dates in the configured timezone,
HH:MM times and de-duplicated tag lists.
"""

from __future__ import annotations

import html as html_lib
import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from dateutil import parser as dateutil_parser

from ripples.config import settings

_TAG_RE = re.compile(r"<[^>]*>")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_HHMM_RE = re.compile(r"^(\d{1,2})(?::(\d{1,2}))?$")


def strip_html(value: str | None) -> str:
    """Drop tags, unescape entities and collapse whitespace."""
    text = _TAG_RE.sub(" ", value or "")
    return re.sub(r"\s+", " ", html_lib.unescape(text)).strip()


def plain_text_from(
    text: str | None = None,
    html: str | None = None,
    content: str | None = None,
) -> str:
    """Best-effort plain text: text wins, then content, then html."""
    if isinstance(text, str) and text.strip():
        return text.strip()
    if isinstance(content, str) and content.strip():
        return strip_html(content)
    if isinstance(html, str) and html.strip():
        return strip_html(html)
    return ""


def today_iso(tz: str | None = None) -> str:
    return datetime.now(ZoneInfo(tz or settings.TIMEZONE)).date().isoformat()


def normalize_date(value: date | datetime | str | None, tz: str | None = None) -> str:
    """Return an ISO date; anything unreadable falls back to today in tz."""
    zone = ZoneInfo(tz or settings.TIMEZONE)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(zone)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    raw = str(value or "").strip()
    if not raw:
        return today_iso(tz)
    if _ISO_DATE_RE.match(raw):
        return raw
    try:
        parsed = dateutil_parser.parse(raw)
    except (ValueError, OverflowError):
        return today_iso(tz)
    return normalize_date(parsed, tz)


def normalize_hhmm(value: str | int | None) -> str | None:
    """'9' -> '09:00', '9:5' -> '09:05'; None for anything else."""
    if value is None or value == "":
        return None
    m = _HHMM_RE.match(str(value).strip())
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2) or 0)
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def dedupe_tags(raw: list[str] | str | None) -> list[str]:
    """Case-insensitive de-duplication; the first spelling of a tag is kept."""
    if raw is None:
        items: list[str] = []
    elif isinstance(raw, str):
        items = raw.split(",")
    else:
        items = [str(tag) for tag in raw]

    seen: set[str] = set()
    out: list[str] = []
    for tag in (t.strip() for t in items):
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        out.append(tag)
    return out
