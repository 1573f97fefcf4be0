"""
CLI (Command Line Interface).

Quick terminal commands around the enrolled-courses snapshot, e.g.:

    classplan check --course-id 12 MO:18:2 TU:18:2
    classplan commit --course-id 12 MO:18:2:HS 8
    classplan conflicts
    classplan today
    classplan week
    classplan edit --course-id 12

Note:
- The interactive editor lives in classplan/interactive.py
- This CLI prints plain text (no rich formatting)
- The snapshot path comes from --snapshot, else $CLASSPLAN_SNAPSHOT,
  else ./enrolled_courses.json
"""

from __future__ import annotations

import argparse
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from classplan.conflicts import ConflictResult, evaluate_all, find_conflicts
from classplan.logging_config import setup_logging
from classplan.model import (
    IN_PROGRESS,
    MAX_BLOCKS,
    WEEK,
    Day,
    EnrolledCourse,
    ScheduleBlock,
    ValidationError,
    is_in_progress,
    normalize_status,
)
from classplan.snapshot import SnapshotError, find_course_record, load_snapshot
from classplan.store import ScheduleBlockStore
from classplan.timetable import classes_on, current_or_next, day_of, week_view


ENV_SNAPSHOT = "CLASSPLAN_SNAPSHOT"


def _default_snapshot_path() -> Path:
    return Path(os.getenv(ENV_SNAPSHOT, "enrolled_courses.json"))


def parse_block_arg(text: str) -> ScheduleBlock:
    """
    Parse 'DAY:HOUR:DURATION[:ROOM]' (e.g. 'MO:18:2:HS 8') into a block.
    """
    parts = text.split(":", 3)
    if len(parts) < 3:
        raise ValidationError(f"Expected DAY:HOUR:DURATION[:ROOM], got {text!r}")
    room = parts[3] if len(parts) == 4 else ""
    return ScheduleBlock(parts[0], parts[1], parts[2], room)


def _build_store(args: argparse.Namespace) -> ScheduleBlockStore:
    """
    Draft from the command line blocks, else from the course's committed
    schedule (edit mode), else the default block (new course).
    """
    if args.blocks:
        if len(args.blocks) > MAX_BLOCKS:
            raise ValidationError(f"At most {MAX_BLOCKS} blocks per course")
        return ScheduleBlockStore([parse_block_arg(b) for b in args.blocks])

    record = find_course_record(args.snapshot, args.course_id) if args.course_id else None
    return ScheduleBlockStore.from_record(record)


def _block_line(i: int, block: ScheduleBlock, result: ConflictResult) -> str:
    status = result.reason if result.conflict else "OK"
    room = f" @ {block.room}" if block.room else ""
    return f"Block {i + 1}: {block.day.value} {block.start_hour}:00-{block.end_hour}:00{room} | {status}"


def _evaluate_draft(
    args: argparse.Namespace, courses: list[EnrolledCourse]
) -> tuple[ScheduleBlockStore, list[ConflictResult]]:
    store = _build_store(args)
    results = evaluate_all(store.blocks, courses, args.course_id)
    for i, (block, result) in enumerate(zip(store.blocks, results)):
        print(_block_line(i, block, result))
    return store, results


def _cmd_check(args: argparse.Namespace, courses: list[EnrolledCourse]) -> int:
    """
    Print the conflict status of every draft block. Exit 1 on any conflict.
    """
    if not is_in_progress(normalize_status(args.status)):
        print(f"Status {args.status!r}: no schedule to check.")
        return 0

    _, results = _evaluate_draft(args, courses)
    if any(r.conflict for r in results):
        print("Schedule has conflicts.")
        return 1
    print("No conflicts found.")
    return 0


def _cmd_commit(args: argparse.Namespace, courses: list[EnrolledCourse]) -> int:
    """
    Print the JSON payload to save, or refuse while any block conflicts.
    """
    if not is_in_progress(normalize_status(args.status)):
        store = ScheduleBlockStore()
    else:
        store, results = _evaluate_draft(args, courses)
        if any(r.conflict for r in results):
            print("Refusing to commit: resolve the conflicts first.")
            return 1

    print(json.dumps(store.to_payload(args.status), indent=2, ensure_ascii=False))
    return 0


def _cmd_conflicts(args: argparse.Namespace, courses: list[EnrolledCourse]) -> int:
    """
    Print all overlaps among the committed schedules of in-progress courses.
    """
    confs = find_conflicts(courses)
    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for c1, b1, c2, b2 in confs:
        print(
            f"- {b1.day.value} {b1.start_hour}:00-{b1.end_hour}:00 {c1.name}"
            f"  <->  {b2.day.value} {b2.start_hour}:00-{b2.end_hour}:00 {c2.name}"
        )
    return 0


def _cmd_today(args: argparse.Namespace, courses: list[EnrolledCourse]) -> int:
    now = datetime.now()
    day = Day.parse(args.day) if args.day else day_of(now)
    hour = now.hour if args.hour is None else args.hour

    slots = classes_on(courses, day, hour)
    if not slots:
        print(f"No classes on {day.value}.")
        return 0

    print(f"Classes on {day.value}:")
    for slot in slots:
        marker = "*" if slot.is_current else "-"
        print(f"{marker} {slot.line()}")

    upcoming = current_or_next(courses, day, hour)
    if upcoming is None:
        print("No more classes today.")
    elif upcoming.is_current:
        print(f"Now: {upcoming.course_name}")
    else:
        print(f"Next: {upcoming.course_name} at {upcoming.block.start_hour}:00")
    return 0


def _cmd_week(args: argparse.Namespace, courses: list[EnrolledCourse]) -> int:
    view = week_view(courses)
    if not any(view.values()):
        print("No scheduled classes.")
        return 0

    for day in WEEK:
        if not view[day]:
            continue
        print(day.value)
        for slot in view[day]:
            print(f"  - {slot.line()}")
    return 0


def _cmd_edit(args: argparse.Namespace, courses: list[EnrolledCourse]) -> int:
    from classplan.interactive import run_editor

    store = _build_store(args)
    payload = run_editor(store, courses, exclude_course_id=args.course_id, status=args.status)
    if payload is None:
        return 1
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def _add_draft_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--course-id", type=str, default=None, help="Course being edited (excluded from checks)")
    p.add_argument("--status", type=str, default=IN_PROGRESS, help="Enrollment status (default: in_progress)")
    p.add_argument("blocks", nargs="*", help="Draft blocks as DAY:HOUR:DURATION[:ROOM]")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="classplan", description="Weekly class schedule conflict checker")
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help=f"Enrolled courses JSON (default: ${ENV_SNAPSHOT} or enrolled_courses.json)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Check draft blocks for conflicts")
    _add_draft_arguments(p_check)

    p_commit = sub.add_parser("commit", help="Print the save payload if the draft is conflict free")
    _add_draft_arguments(p_commit)

    sub.add_parser("conflicts", help="Show overlaps among committed schedules")

    p_today = sub.add_parser("today", help="Show the classes of one day")
    p_today.add_argument("--day", type=str, default=None, help="Day code (default: today)")
    p_today.add_argument("--hour", type=int, default=None, help="Hour of day (default: now)")

    sub.add_parser("week", help="Show the weekly timetable")

    p_edit = sub.add_parser("edit", help="Interactive schedule editor")
    _add_draft_arguments(p_edit)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else None)
    if args.snapshot is None:
        args.snapshot = _default_snapshot_path()

    handlers: dict[str, Any] = {
        "check": _cmd_check,
        "commit": _cmd_commit,
        "conflicts": _cmd_conflicts,
        "today": _cmd_today,
        "week": _cmd_week,
        "edit": _cmd_edit,
    }

    try:
        courses = load_snapshot(args.snapshot, strict=True)
        raise SystemExit(handlers[args.command](args, courses))
    except SnapshotError as exc:
        print(f"Error: {exc}")
        raise SystemExit(2)
    except ValidationError as exc:
        print(f"Invalid input: {exc}")
        raise SystemExit(2)
