"""
Journal Ripples — Command line.

    python main.py analyze "Remember to send the slides this Friday." --date 2024-06-10
    python main.py expand "FREQ=MONTHLY;BYMONTHDAY=15" --anchor 2024-01-20 \\
        --from 2024-01-01 --to 2024-04-30

`analyze` is a dry run of the entry pipeline: it prints the enriched
candidates as JSON and stores nothing.
"""

from __future__ import annotations

import argparse
import json
import sys

from ripples.config import settings
from ripples.core.entry_automation import analyze_text
from ripples.core.normalize import normalize_date
from ripples.core.recurrence import expand
from ripples.core.rrule import RecurrenceRule, humanize


def _cmd_analyze(args: argparse.Namespace) -> int:
    reference = normalize_date(args.date, settings.TIMEZONE)
    candidates = analyze_text(args.text, reference)
    print(json.dumps([c.model_dump(exclude_none=True) for c in candidates], indent=2))
    return 0


def _cmd_expand(args: argparse.Namespace) -> int:
    try:
        rule = RecurrenceRule.from_rrule(args.rule)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    print(f"# {humanize(rule)}")
    for day in expand(rule, args.anchor, args.date_from, args.date_to):
        print(day)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ripples", description="Journal ripples: action extraction and recurrence tools",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="print the candidates a journal text would yield")
    analyze.add_argument("text", help="plain journal text")
    analyze.add_argument("--date", default=None, help="journal date YYYY-MM-DD (default: today)")
    analyze.set_defaults(func=_cmd_analyze)

    exp = sub.add_parser("expand", help="list occurrences of a recurrence rule")
    exp.add_argument("rule", help='e.g. "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO"')
    exp.add_argument("--anchor", required=True, help="series start date YYYY-MM-DD")
    exp.add_argument("--from", dest="date_from", required=True, help="window start YYYY-MM-DD")
    exp.add_argument("--to", dest="date_to", required=True, help="window end YYYY-MM-DD")
    exp.set_defaults(func=_cmd_expand)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)
