"""
Conflict detection.

Decides whether a draft block overlaps another draft block of the same
course, or a committed block of another course the student is taking.
Overlap rule (half-open hour intervals on the same day):
    a.start < b.end AND b.start < a.end
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from classplan.model import EnrolledCourse, ScheduleBlock


@dataclass(frozen=True)
class ConflictResult:
    """
    Outcome of one evaluation. reason is None when the block is free.
    """

    reason: Optional[str] = None

    @property
    def conflict(self) -> bool:
        return self.reason is not None


NO_CONFLICT = ConflictResult()


def overlaps(a: ScheduleBlock, b: ScheduleBlock) -> bool:
    # Touching endpoints (a.end == b.start) is NOT an overlap
    return a.day == b.day and a.start_hour < b.end_hour and b.start_hour < a.end_hour


def _competing_courses(
    other_courses: Iterable[EnrolledCourse], exclude_course_id: Optional[Any]
) -> Iterable[EnrolledCourse]:
    exclude = None if exclude_course_id is None else str(exclude_course_id).strip()
    for course in other_courses:
        if exclude is not None and course.course_id == exclude:
            continue
        if not course.in_progress:
            continue
        yield course


def evaluate(
    blocks: Sequence[ScheduleBlock],
    index: int,
    other_courses: Iterable[EnrolledCourse] = (),
    exclude_course_id: Optional[Any] = None,
) -> ConflictResult:
    """
    Evaluate the block at index.

    Other draft blocks are checked first, in ascending order; only then the
    committed blocks of other in-progress courses, in snapshot order. The
    first overlap found is reported.
    """
    block = blocks[index]

    for i, other in enumerate(blocks):
        if i != index and overlaps(block, other):
            return ConflictResult(f"Overlaps with Block {i + 1}")

    for course in _competing_courses(other_courses, exclude_course_id):
        for other in course.blocks:
            if overlaps(block, other):
                return ConflictResult(f"Conflicts with {course.name} ({other.label})")

    return NO_CONFLICT


def evaluate_all(
    blocks: Sequence[ScheduleBlock],
    other_courses: Iterable[EnrolledCourse] = (),
    exclude_course_id: Optional[Any] = None,
) -> list[ConflictResult]:
    """
    Evaluate every draft block independently (no caching between blocks).
    """
    courses = list(other_courses)
    return [evaluate(blocks, i, courses, exclude_course_id) for i in range(len(blocks))]


def can_commit(
    blocks: Sequence[ScheduleBlock],
    other_courses: Iterable[EnrolledCourse] = (),
    exclude_course_id: Optional[Any] = None,
) -> bool:
    return not any(r.conflict for r in evaluate_all(blocks, other_courses, exclude_course_id))


def find_conflicts(
    courses: Iterable[EnrolledCourse],
) -> list[tuple[EnrolledCourse, ScheduleBlock, EnrolledCourse, ScheduleBlock]]:
    """
    Find overlapping committed blocks among in-progress courses.

    Each pair appears once, in snapshot order. Two blocks of the same course
    are reported too, since a committed schedule should never contain them.
    """
    slots: list[tuple[EnrolledCourse, ScheduleBlock]] = []
    for course in courses:
        if not course.in_progress:
            continue
        for block in course.blocks:
            slots.append((course, block))

    conflicts: list[tuple[EnrolledCourse, ScheduleBlock, EnrolledCourse, ScheduleBlock]] = []

    # O(n^2) is fine for a handful of courses
    for i in range(len(slots)):
        c1, b1 = slots[i]
        for j in range(i + 1, len(slots)):
            c2, b2 = slots[j]
            if overlaps(b1, b2):
                conflicts.append((c1, b1, c2, b2))

    return conflicts
