"""
Central data model definitions used across the project.

This module defines the canonical structure of schedule blocks and enrolled
courses so that:
- the draft store, the conflict detector and the timetable share field names
- legacy records (one flat day/hour/duration per course) are normalized once
- the wire format handed to the persistence layer stays in one place
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Sequence, Tuple, Union


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

# Product limit on blocks per course (the detector itself is unbounded)
MAX_BLOCKS = 3

DEFAULT_START_HOUR = 18
DEFAULT_DURATION_HOURS = 2

# Legacy flat records sometimes lack a duration
LEGACY_DEFAULT_DURATION = 2

# Facility window offered by the editor's time picker
OPEN_HOUR = 8
CLOSE_HOUR = 23

FIELDS = ("day", "start_hour", "duration_hours", "room")

NOT_TAKEN = "not_taken"
IN_PROGRESS = "in_progress"
REGULAR = "regular"
PASSED = "passed"
STATUSES = (NOT_TAKEN, IN_PROGRESS, REGULAR, PASSED)

# Status keys used by older records, mapped key by key
LEGACY_STATUSES = {
    "no_cursado": NOT_TAKEN,
    "cursado": IN_PROGRESS,
    "regular": REGULAR,
    "aprobado": PASSED,
}

EMPTY_SCHEDULE: dict[str, None] = {"day": None, "hour": None, "duration": None, "room": None}


class ValidationError(ValueError):
    """
    A value violates the domain of a schedule field.
    """


# ---------------------------------------------------------------------------
# Days
# ---------------------------------------------------------------------------


class Day(str, Enum):
    MO = "MO"
    TU = "TU"
    WE = "WE"
    TH = "TH"
    FR = "FR"
    SA = "SA"
    SU = "SU"

    @classmethod
    def parse(cls, value: Union[str, "Day"]) -> "Day":
        """
        Parse a day code ('mo', ' TU ', 'LU', ...) into a Day.

        Accepts the Spanish codes of older records as aliases.
        """
        if isinstance(value, Day):
            return value
        code = str(value or "").strip().upper()
        code = _DAY_ALIASES.get(code, code)
        try:
            return cls(code)
        except ValueError:
            raise ValidationError(f"Invalid day: {value!r}") from None


_DAY_ALIASES = {"LU": "MO", "MA": "TU", "MI": "WE", "JU": "TH", "VI": "FR", "DO": "SU"}

# Sunday is part of the display vocabulary only
EDITABLE_DAYS: Tuple[Day, ...] = (Day.MO, Day.TU, Day.WE, Day.TH, Day.FR, Day.SA)
WEEK: Tuple[Day, ...] = EDITABLE_DAYS + (Day.SU,)


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------


def _as_int(name: str, value: Any) -> int:
    # bool is an int subclass; a checkbox value is never an hour
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {name}: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        try:
            return int(value.strip())
        except ValueError:
            raise ValidationError(f"Invalid {name}: {value!r}") from None
    raise ValidationError(f"Invalid {name}: {value!r}")


def validate_field(name: str, value: Any, editable: bool = False) -> Any:
    """
    Check one block field against its domain and return the normalized value.

    With editable=True the day must also be selectable in the editor
    (no Sunday). Raises ValidationError.
    """
    if name == "day":
        day = Day.parse(value)
        if editable and day not in EDITABLE_DAYS:
            raise ValidationError(f"Day not selectable: {day.value}")
        return day
    if name == "start_hour":
        hour = _as_int(name, value)
        if not (0 <= hour <= 23):
            raise ValidationError(f"start_hour out of range: {hour}")
        return hour
    if name == "duration_hours":
        duration = _as_int(name, value)
        if duration < 1:
            raise ValidationError(f"duration_hours must be >= 1, got {duration}")
        return duration
    if name == "room":
        return "" if value is None else str(value).strip()
    raise ValidationError(f"Unknown field: {name!r}")


# ---------------------------------------------------------------------------
# Blocks and courses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScheduleBlock:
    """
    One weekly recurring time slot.

    end_hour is exclusive, so a block ending at 12 and one starting at 12
    do not overlap.
    """

    day: Day
    start_hour: int
    duration_hours: int
    room: str = ""

    def __post_init__(self) -> None:
        for name in FIELDS:
            object.__setattr__(self, name, validate_field(name, getattr(self, name)))

    @property
    def end_hour(self) -> int:
        return self.start_hour + self.duration_hours

    @property
    def label(self) -> str:
        return f"{self.day.value} {self.start_hour}:00"

    def to_record(self) -> dict[str, Any]:
        return {
            "day": self.day.value,
            "hour": self.start_hour,
            "duration": self.duration_hours,
            "room": self.room or None,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ScheduleBlock":
        """
        Build a block from a wire record {day, hour, duration, room}.
        """
        if not isinstance(record, Mapping):
            raise ValidationError(f"Schedule entry is not an object: {record!r}")
        record = _english_keys(record)
        duration = record.get("duration")
        return cls(
            day=record.get("day"),
            start_hour=record.get("hour"),
            duration_hours=LEGACY_DEFAULT_DURATION if duration is None else duration,
            room=record.get("room"),
        )


# Keys of older records, mapped to their current names when those are absent
_LEGACY_KEYS = {
    "dia": "day",
    "hora": "hour",
    "duracion": "duration",
    "aula": "room",
    "nombre": "name",
    "estado": "status",
}


def _english_keys(record: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(record)
    for old, new in _LEGACY_KEYS.items():
        if out.get(new) is None and out.get(old) is not None:
            out[new] = out[old]
    return out


def default_block() -> ScheduleBlock:
    return ScheduleBlock(Day.MO, DEFAULT_START_HOUR, DEFAULT_DURATION_HOURS, "")


def to_blocks(record: Mapping[str, Any]) -> List[ScheduleBlock]:
    """
    Normalize a course record into its list of blocks.

    Priority:
    1. non-empty "schedules" array
    2. legacy flat day/hour/duration/room fields (day and hour present)
    3. no blocks
    """
    record = _english_keys(record)
    schedules = record.get("schedules")
    if isinstance(schedules, list) and schedules:
        return [ScheduleBlock.from_record(s) for s in schedules]

    if record.get("day") and record.get("hour") is not None:
        return [ScheduleBlock.from_record(record)]

    return []


def normalize_status(value: Any) -> str:
    """
    Map a status value to its canonical key (exact match only).

    Unknown values are returned unchanged and never count as in progress.
    """
    status = "" if value is None else str(value)
    if status in STATUSES:
        return status
    return LEGACY_STATUSES.get(status, status)


def is_in_progress(status: str) -> bool:
    return status == IN_PROGRESS


@dataclass(frozen=True)
class EnrolledCourse:
    """
    Read-only view of one enrolled course and its committed schedule.
    """

    course_id: str
    name: str
    status: str
    blocks: Tuple[ScheduleBlock, ...] = field(default_factory=tuple)

    @property
    def in_progress(self) -> bool:
        return is_in_progress(self.status)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "EnrolledCourse":
        """
        Build a course from a snapshot record.

        Older records use Spanish keys (nombre, estado, dia, hora, duracion,
        aula) and may nest the name as {"materia": {"nombre": ...}}.
        """
        record = _english_keys(record)
        raw_id = record.get("id", record.get("course_id"))
        if raw_id is None or str(raw_id).strip() == "":
            raise ValidationError("Course record without id")

        name = record.get("name")
        if not name:
            nested = record.get("materia")
            if isinstance(nested, Mapping):
                name = nested.get("nombre") or nested.get("name")
        return cls(
            course_id=str(raw_id).strip(),
            name=str(name or "Course"),
            status=normalize_status(record.get("status")),
            blocks=tuple(to_blocks(record)),
        )


def schedule_payload(
    blocks: Sequence[ScheduleBlock], status: str
) -> Union[List[dict[str, Any]], dict[str, None]]:
    """
    Wire payload for a commit: block records for an in-progress course,
    the empty-schedule sentinel for any other status.
    """
    if not is_in_progress(normalize_status(status)):
        return dict(EMPTY_SCHEDULE)
    return [b.to_record() for b in blocks]

