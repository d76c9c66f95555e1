"""
Journal Ripples — Recurrence Rule.

The normalized cadence description embedded in appointments, tasks and
ripples, plus its wire format: a semicolon-joined KEY=VALUE string using the
keys FREQ, INTERVAL, BYDAY, BYMONTHDAY, BYSETPOS, BYMONTH and UNTIL.

JSON-ish example of the model:
{
    "freq": "MONTHLY",
    "interval": 1,
    "by_weekday": ["FR"],
    "by_set_position": 1
}
  <->  "FREQ=MONTHLY;BYDAY=FR;BYSETPOS=1"
"""

from __future__ import annotations

import re
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Freq = Literal["DAILY", "WEEKLY", "MONTHLY", "YEARLY"]
WeekdayCode = Literal["MO", "TU", "WE", "TH", "FR", "SA", "SU"]

# Index matches date.weekday(): Monday == 0
WEEKDAY_CODES: tuple[str, ...] = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

_ORDINAL_WORDS = {1: "first", 2: "second", 3: "third", 4: "fourth", -1: "last"}


class RecurrenceRule(BaseModel):
    """A validated recurrence rule. A rule without freq cannot be built."""

    model_config = ConfigDict(frozen=True)

    freq: Freq
    interval: int = Field(default=1, ge=1)
    by_weekday: tuple[WeekdayCode, ...] = ()
    by_month_day: int | None = Field(default=None, ge=1, le=31)
    by_set_position: Literal[1, 2, 3, 4, -1] | None = None
    by_month: int | None = Field(default=None, ge=1, le=12)
    until: date | None = None

    @field_validator("by_weekday", mode="before")
    @classmethod
    def dedupe_weekdays(cls, v: object) -> object:
        if isinstance(v, str):
            v = [code for code in v.split(",") if code]
        if isinstance(v, (list, tuple)):
            return tuple(dict.fromkeys(str(code).upper() for code in v))
        return v

    @model_validator(mode="after")
    def check_set_position(self) -> RecurrenceRule:
        if self.by_set_position is not None and len(self.by_weekday) != 1:
            raise ValueError("by_set_position requires exactly one weekday")
        return self

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    def to_rrule(self) -> str:
        """Serialize to the KEY=VALUE string; absent keys are omitted."""
        parts = [f"FREQ={self.freq}"]
        if self.interval != 1:
            parts.append(f"INTERVAL={self.interval}")
        if self.by_weekday:
            parts.append(f"BYDAY={','.join(self.by_weekday)}")
        if self.by_month_day is not None:
            parts.append(f"BYMONTHDAY={self.by_month_day}")
        if self.by_set_position is not None:
            parts.append(f"BYSETPOS={self.by_set_position}")
        if self.by_month is not None:
            parts.append(f"BYMONTH={self.by_month}")
        if self.until is not None:
            parts.append(f"UNTIL={self.until.isoformat()}")
        return ";".join(parts)

    @classmethod
    def from_rrule(cls, value: str) -> RecurrenceRule:
        """Parse the KEY=VALUE string.

        Raises ValueError when FREQ is missing or any value is invalid
        (pydantic's ValidationError is a ValueError).
        """
        fields = parse_rrule_fields(value)
        if not fields.get("FREQ"):
            raise ValueError(f"Recurrence rule has no FREQ: {value!r}")

        data: dict[str, object] = {"freq": fields["FREQ"]}
        if fields.get("INTERVAL"):
            data["interval"] = int(fields["INTERVAL"])
        if fields.get("BYDAY"):
            data["by_weekday"] = fields["BYDAY"]
        if fields.get("BYMONTHDAY"):
            data["by_month_day"] = int(fields["BYMONTHDAY"])
        if fields.get("BYSETPOS"):
            data["by_set_position"] = int(fields["BYSETPOS"])
        if fields.get("BYMONTH"):
            data["by_month"] = int(fields["BYMONTH"])
        if fields.get("UNTIL"):
            data["until"] = _parse_until(fields["UNTIL"])
        return cls(**data)


def parse_rrule_fields(value: str | None) -> dict[str, str]:
    """Split a rule string into upper-cased KEY -> VALUE pairs, leniently."""
    out: dict[str, str] = {}
    for part in str(value or "").split(";"):
        key, _, val = part.partition("=")
        key = key.strip().upper()
        if key.startswith("RRULE:"):
            key = key.removeprefix("RRULE:")
        if key:
            out[key] = val.strip().upper()
    return out


def _parse_until(raw: str) -> date:
    digits = re.sub(r"[^0-9]", "", raw)[:8]
    if len(digits) != 8:
        raise ValueError(f"Invalid UNTIL value: {raw!r}")
    return date(int(digits[:4]), int(digits[4:6]), int(digits[6:8]))


def humanize(rule: RecurrenceRule) -> str:
    """Short display label for a rule, e.g. 'Every 2 weeks on MO, TH'."""
    i = rule.interval
    days = ", ".join(rule.by_weekday)
    if rule.freq == "DAILY":
        return "Every day" if i == 1 else f"Every {i} days"
    if rule.freq == "WEEKLY":
        if i == 1:
            return f"Every {days}" if days else "Every week"
        return f"Every {i} weeks on {days}" if days else f"Every {i} weeks"
    if rule.freq == "MONTHLY":
        if rule.by_month_day is not None:
            if i == 1:
                return f"Every month on the {rule.by_month_day}"
            return f"Every {i} months on the {rule.by_month_day}"
        if rule.by_set_position is not None:
            ordinal = _ORDINAL_WORDS[rule.by_set_position]
            if i == 1:
                return f"Every {ordinal} {days} each month"
            return f"Every {i} months on the {ordinal} {days}"
        return "Every month" if i == 1 else f"Every {i} months"
    if rule.by_month is not None and rule.by_month_day is not None:
        return f"Every year on {rule.by_month}/{rule.by_month_day}"
    return "Every year" if i == 1 else f"Every {i} years"
