"""
Reading the enrolled-courses snapshot.

The snapshot is the read-only list of the student's courses with their
committed schedules, as exported by the application's persistence layer:

    [{"id": 7, "name": "Algebra", "status": "in_progress",
      "schedules": [{"day": "MO", "hour": 19, "duration": 2, "room": "A1"}]},
     ...]

A {"courses": [...]} wrapper is accepted as well. Older course records carry
a single flat day/hour/duration/room instead of "schedules"; they are
normalized here, once, via model.to_blocks.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from classplan.model import EnrolledCourse, ValidationError

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """
    The snapshot file cannot be read or has an unexpected shape.
    """


def _read_records(path: Path) -> list[Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise SnapshotError(f"Snapshot not found: {path}") from exc
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("courses")
    if not isinstance(data, list):
        raise SnapshotError(f"Snapshot {path} must contain a list of courses")
    return data


def load_snapshot(path: str | Path, strict: bool = False) -> list[EnrolledCourse]:
    """
    Load all enrolled courses from a snapshot file.

    Non-strict mode (default) never crashes the caller: a missing or broken
    file yields an empty snapshot and malformed course records are skipped
    with a warning. strict=True raises SnapshotError instead.
    """
    snapshot_path = Path(path)

    try:
        records = _read_records(snapshot_path)
    except SnapshotError:
        if strict:
            raise
        logger.warning("Using empty snapshot: %s is missing or unreadable", snapshot_path)
        return []

    courses: list[EnrolledCourse] = []
    for pos, record in enumerate(records):
        if not isinstance(record, dict):
            if strict:
                raise SnapshotError(f"Course #{pos + 1} is not an object")
            logger.warning("Skipping course #%d: not an object", pos + 1)
            continue
        try:
            courses.append(EnrolledCourse.from_record(record))
        except ValidationError as exc:
            if strict:
                raise SnapshotError(f"Course #{pos + 1}: {exc}") from exc
            logger.warning("Skipping course #%d: %s", pos + 1, exc)

    logger.debug("Loaded %d course(s) from %s", len(courses), snapshot_path)
    return courses


def find_course_record(path: str | Path, course_id: Any) -> Optional[dict[str, Any]]:
    """
    Return the raw record of one course, used to seed an edit session.

    Returns None if the course (or the file) does not exist.
    """
    try:
        records = _read_records(Path(path))
    except SnapshotError:
        return None

    wanted = str(course_id).strip()
    for record in records:
        if not isinstance(record, dict):
            continue
        raw_id = record.get("id", record.get("course_id"))
        if raw_id is not None and str(raw_id).strip() == wanted:
            return record
    return None
