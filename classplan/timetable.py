"""
Timetable views over the committed schedules of in-progress courses.

- classes_on: one day's classes, sorted by start hour
- current_or_next: the class running now, else the next one today
- week_view: all classes grouped by day
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from classplan.model import WEEK, Day, EnrolledCourse, ScheduleBlock


@dataclass(frozen=True)
class ClassSlot:
    course_name: str
    block: ScheduleBlock
    is_current: bool = False

    def line(self) -> str:
        b = self.block
        text = f"{b.start_hour}:00-{b.end_hour}:00 {self.course_name}"
        if b.room:
            text += f" @ {b.room}"
        return text


def day_of(moment: datetime) -> Day:
    return WEEK[moment.weekday()]


def classes_on(courses: Iterable[EnrolledCourse], day: Day, hour: Optional[int] = None) -> list[ClassSlot]:
    """
    List the classes of in-progress courses on one day.

    If hour is given, the class running at that hour is flagged is_current.
    """
    slots: list[ClassSlot] = []
    for course in courses:
        if not course.in_progress:
            continue
        for block in course.blocks:
            if block.day != day:
                continue
            current = hour is not None and block.start_hour <= hour < block.end_hour
            slots.append(ClassSlot(course.name, block, current))

    slots.sort(key=lambda s: (s.block.start_hour, s.course_name))
    return slots


def current_or_next(courses: Iterable[EnrolledCourse], day: Day, hour: int) -> Optional[ClassSlot]:
    """
    Return the class running at hour, else the soonest one starting later
    the same day, else None.
    """
    upcoming: Optional[ClassSlot] = None
    for slot in classes_on(courses, day, hour):
        if slot.is_current:
            return slot
        if slot.block.start_hour > hour and upcoming is None:
            upcoming = slot
    return upcoming


def week_view(courses: Iterable[EnrolledCourse]) -> dict[Day, list[ClassSlot]]:
    """
    Group all in-progress classes by day (MO..SU), each day sorted by hour.
    """
    course_list = list(courses)
    return {day: classes_on(course_list, day) for day in WEEK}
