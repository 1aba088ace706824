"""
Command-line interface for the curriculum scheduling engine.

Usage examples:
    lms-schedule generate --start 2024-09-03 --count 7
    lms-schedule check --roster data/sample_roster.json --person 2 --date 2024-09-03 --slot both
    lms-schedule precheck --roster data/sample_roster.json
    lms-schedule classes --roster data/sample_roster.json --person 3 --today 2024-09-04
    lms-schedule cadence --roster data/sample_roster.json --settings data/cadence.json

Exit codes:
    0  success, nothing to report
    1  bad arguments, unreadable file, or precheck found blocking errors
    2  a double booking was found, or a mentorship pair is not on track
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import sys
from typing import List, Optional

from lms_schedule.engine.api import (PersonClass, cadence_alerts, check_conflict,
    classes_for_person, generate_class_dates, mentorship_pairs, split_upcoming,
    students_without_mentor)
from lms_schedule.engine.precheck import precheck
from lms_schedule.io_json import ConfigError, load_roster, load_settings
from lms_schedule.log import get_logger, setup_logging
from lms_schedule.models import CadenceSettings, Roster, TimeSlot, coerce_date

log = get_logger(__name__)


def _load(path: str) -> Roster:
    try:
        return load_roster(path)
    except FileNotFoundError:
        print(f"[ERROR] File not found: {path}", file=sys.stderr)
        sys.exit(1)
    except (ConfigError, ValueError) as e:
        print(f"[ERROR] Could not load roster: {e}", file=sys.stderr)
        sys.exit(1)


def _cmd_generate(args: argparse.Namespace) -> int:
    rows = generate_class_dates(args.start, args.count)
    if args.json:
        print(json.dumps(
            [{"date": r.date.isoformat() if r.date else "", "hour": r.time_slot.value}
             for r in rows],
            indent=2,
        ))
        return 0
    for i, r in enumerate(rows, 1):
        when = f"{r.date.isoformat()} {r.date.strftime('%a')}" if r.date else "unscheduled"
        print(f"  Class {i:>3}  {when:<15}  {r.time_slot.value} hour")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    roster = _load(args.roster)
    if coerce_date(args.date) is None:
        print(f"[ERROR] Invalid date: {args.date}", file=sys.stderr)
        return 1
    result = check_conflict(args.person, args.date, TimeSlot(args.slot), roster,
                            exclude_slot_id=args.exclude)
    if not result.has_conflict:
        print(f"No conflicts for person {args.person} on {args.date} ({args.slot}).")
        return 0
    person = roster.get_person(args.person)
    who    = person.name if person else f"Person {args.person}"
    print(f"{who} is already booked:")
    for c in result.conflicting_slots:
        print(f"  - {c.describe()}")
    return 2


def _cmd_precheck(args: argparse.Namespace) -> int:
    roster = _load(args.roster)
    errors, warnings = precheck(roster)
    for w in warnings:
        print(f"[WARNING] {w}")
    if errors:
        print(f"\n[ERROR] {len(errors)} roster error(s) found:\n", file=sys.stderr)
        for i, err in enumerate(errors, 1):
            print(f"  {i}. {err}", file=sys.stderr)
        return 1
    print("Roster OK.")
    return 0


def _print_classes(label: str, rows: List[PersonClass]) -> None:
    print(f"{label}:")
    if not rows:
        print("  (none)")
    for c in rows:
        slot = c.context.slot
        print(f"  {slot.date.isoformat()}  {slot.time_slot.value:<6}  {c.role:<10}  "
              f"{c.context.course_name}: {slot.title}")


def _cmd_classes(args: argparse.Namespace) -> int:
    roster = _load(args.roster)
    person = roster.get_person(args.person)
    if person is None:
        print(f"[ERROR] Unknown person id: {args.person}", file=sys.stderr)
        return 1
    today = coerce_date(args.today) if args.today else dt.date.today()
    if today is None:
        print(f"[ERROR] Invalid date: {args.today}", file=sys.stderr)
        return 1
    upcoming, past = split_upcoming(classes_for_person(roster, person), today)
    print(f"Classes for {person.name} as of {today.isoformat()}")
    _print_classes("Upcoming", upcoming)
    _print_classes("Past", past)
    return 0


def _cmd_cadence(args: argparse.Namespace) -> int:
    roster = _load(args.roster)
    settings = CadenceSettings()
    if args.settings:
        try:
            settings = load_settings(args.settings)
        except FileNotFoundError:
            print(f"[ERROR] File not found: {args.settings}", file=sys.stderr)
            return 1
        except ConfigError as e:
            print(f"[ERROR] Could not load settings: {e}", file=sys.stderr)
            return 1
    today = coerce_date(args.today) if args.today else None
    if args.today and today is None:
        print(f"[ERROR] Invalid date: {args.today}", file=sys.stderr)
        return 1

    pairs = mentorship_pairs(roster, settings, today=today)
    for p in pairs:
        r = p.report
        print(
            f"  {p.label:<40} {p.course_name:<18} "
            f"digital: {r.digital.message:<14} in-person: {r.in_person.message:<14} "
            f"overall: {r.overall_level.value}"
        )

    alerts = cadence_alerts(pairs)
    if alerts:
        print(f"\n{len(alerts)} pair(s) need attention:")
        for p in alerts:
            print(f"  [{p.report.overall_level.value.upper()}] {p.label}")
    orphans = students_without_mentor(roster)
    if orphans:
        print("\nStudents without a mentor: " + ", ".join(s.name for s in orphans))
    return 2 if alerts else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lms-schedule",
        description="Class calendar, double-booking and mentorship cadence checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default="WARNING",
                        help="DEBUG, INFO, WARNING, ERROR (default: WARNING)")
    parser.add_argument("--log-json", action="store_true",
                        help="emit logs as JSON lines on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    g = sub.add_parser("generate", help="print the Tue/Thu calendar for a new subject")
    g.add_argument("--start", required=True, metavar="YYYY-MM-DD")
    g.add_argument("--count", required=True, type=int, metavar="N")
    g.add_argument("--json", action="store_true", help="print JSON instead of a table")
    g.set_defaults(func=_cmd_generate)

    c = sub.add_parser("check", help="check a person for double bookings")
    c.add_argument("--roster", required=True, metavar="FILE")
    c.add_argument("--person", required=True, type=int, metavar="ID")
    c.add_argument("--date", required=True, metavar="YYYY-MM-DD")
    c.add_argument("--slot", default="first", choices=[t.value for t in TimeSlot])
    c.add_argument("--exclude", type=int, default=None, metavar="CLASS_ID",
                   help="ignore this class id (when editing it in place)")
    c.set_defaults(func=_cmd_check)

    p = sub.add_parser("precheck", help="validate roster integrity")
    p.add_argument("--roster", required=True, metavar="FILE")
    p.set_defaults(func=_cmd_precheck)

    t = sub.add_parser("classes", help="upcoming and past classes for one person")
    t.add_argument("--roster", required=True, metavar="FILE")
    t.add_argument("--person", required=True, type=int, metavar="ID")
    t.add_argument("--today", default=None, metavar="YYYY-MM-DD")
    t.set_defaults(func=_cmd_classes)

    k = sub.add_parser("cadence", help="mentorship check-in risk per student")
    k.add_argument("--roster", required=True, metavar="FILE")
    k.add_argument("--settings", default=None, metavar="FILE")
    k.add_argument("--today", default=None, metavar="YYYY-MM-DD")
    k.set_defaults(func=_cmd_cadence)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(json_output=args.log_json, log_level=args.log_level)
    log.debug("command_start", command=args.command)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
