"""
Tests for the interactive schedule editor.

User input is scripted through input_fn; output goes to an in-memory
rich Console so nothing touches the terminal.
"""

import io
import unittest

from rich.console import Console

from classplan.interactive import run_editor
from classplan.model import Day, EnrolledCourse, ScheduleBlock
from classplan.store import ScheduleBlockStore

OTHERS = [EnrolledCourse("1", "Algebra", "in_progress", (ScheduleBlock(Day.MO, 19, 2),))]


def scripted(*answers: str):
    it = iter(answers)
    return lambda msg: next(it)


class TestEditor(unittest.TestCase):
    def setUp(self) -> None:
        self.buf = io.StringIO()
        self.out = Console(file=self.buf, width=120, color_system=None)

    def test_refuses_save_until_conflict_resolved(self) -> None:
        store = ScheduleBlockStore()
        # save (refused), set time 8-10, save
        payload = run_editor(store, OTHERS, input_fn=scripted("7", "5", "8", "10", "7"), out=self.out)
        self.assertIn("Cannot save", self.buf.getvalue())
        self.assertIn("Conflicts with Algebra (MO 19:00)", self.buf.getvalue())
        self.assertEqual(payload, [{"day": "MO", "hour": 8, "duration": 2, "room": None}])

    def test_add_block_day_and_room(self) -> None:
        store = ScheduleBlockStore([ScheduleBlock(Day.MO, 8, 2)])
        answers = scripted("1", "4", "th", "6", "Lab 2", "7")
        payload = run_editor(store, OTHERS, input_fn=answers, out=self.out)
        self.assertEqual(
            payload,
            [
                {"day": "MO", "hour": 8, "duration": 2, "room": None},
                {"day": "TH", "hour": 18, "duration": 2, "room": "Lab 2"},
            ],
        )

    def test_invalid_day_is_reported(self) -> None:
        store = ScheduleBlockStore([ScheduleBlock(Day.MO, 8, 2)])
        payload = run_editor(store, OTHERS, input_fn=scripted("4", "SU", "0"), out=self.out)
        self.assertIsNone(payload)
        self.assertIn("Day not selectable: SU", self.buf.getvalue())
        self.assertIn("Discarded.", self.buf.getvalue())

    def test_non_ascii_digits_are_not_numbers(self) -> None:
        store = ScheduleBlockStore([ScheduleBlock(Day.MO, 8, 2)])
        payload = run_editor(store, OTHERS, input_fn=scripted("5", "\u00b2", "3", "\u00b2", "7"), out=self.out)
        self.assertEqual(self.buf.getvalue().count("Not a number."), 2)
        self.assertEqual(payload, [{"day": "MO", "hour": 8, "duration": 2, "room": None}])

    def test_own_course_not_a_conflict(self) -> None:
        store = ScheduleBlockStore([ScheduleBlock(Day.MO, 19, 2)])
        payload = run_editor(store, OTHERS, exclude_course_id="1", input_fn=scripted("7"), out=self.out)
        self.assertEqual(payload, [{"day": "MO", "hour": 19, "duration": 2, "room": None}])

    def test_remove_keeps_last_block(self) -> None:
        store = ScheduleBlockStore([ScheduleBlock(Day.MO, 8, 1), ScheduleBlock(Day.TU, 8, 1)])
        run_editor(store, [], input_fn=scripted("2", "1", "2", "0"), out=self.out)
        self.assertEqual(store.blocks, (ScheduleBlock(Day.TU, 8, 1),))
        self.assertIn("A scheduled course keeps at least one block.", self.buf.getvalue())

    def test_not_in_progress_returns_empty_schedule(self) -> None:
        payload = run_editor(ScheduleBlockStore(), OTHERS, status="regular", input_fn=scripted(), out=self.out)
        self.assertEqual(payload, {"day": None, "hour": None, "duration": None, "room": None})


if __name__ == "__main__":
    unittest.main()
