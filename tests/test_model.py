import unittest

from classplan.model import (
    EMPTY_SCHEDULE,
    Day,
    EnrolledCourse,
    ScheduleBlock,
    ValidationError,
    normalize_status,
    schedule_payload,
    to_blocks,
)


class TestScheduleBlock(unittest.TestCase):
    def test_end_hour_is_exclusive(self) -> None:
        block = ScheduleBlock(Day.MO, 10, 2)
        self.assertEqual(block.end_hour, 12)
        self.assertEqual(block.label, "MO 10:00")

    def test_zero_duration_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            ScheduleBlock(Day.MO, 10, 0)

    def test_fields_are_normalized(self) -> None:
        block = ScheduleBlock(" we ", "9", 1, None)
        self.assertEqual(block, ScheduleBlock(Day.WE, 9, 1, ""))

    def test_sunday_allowed_in_committed_data(self) -> None:
        self.assertEqual(ScheduleBlock("DO", 10, 1).day, Day.SU)

    def test_from_record(self) -> None:
        block = ScheduleBlock.from_record({"day": "MA", "hour": 8, "duration": 3, "room": "B2"})
        self.assertEqual(block, ScheduleBlock(Day.TU, 8, 3, "B2"))
        self.assertEqual(block.to_record(), {"day": "TU", "hour": 8, "duration": 3, "room": "B2"})

    def test_superscript_digit_hour_rejected(self) -> None:
        for bad in ("\u00b2", "1\u00b2", "+1", "-"):
            with self.assertRaises(ValidationError):
                ScheduleBlock(Day.MO, bad, 2)

    def test_from_record_rejects_non_object(self) -> None:
        for bad in ("MO 10", None, 5, ["MO", 10]):
            with self.assertRaises(ValidationError):
                ScheduleBlock.from_record(bad)

    def test_from_record_spanish_keys(self) -> None:
        block = ScheduleBlock.from_record({"dia": "LU", "hora": "10", "duracion": 3, "aula": "B1"})
        self.assertEqual(block, ScheduleBlock(Day.MO, 10, 3, "B1"))


class TestDay(unittest.TestCase):
    def test_spanish_aliases(self) -> None:
        codes = ["LU", "MA", "MI", "JU", "VI", "SA", "DO"]
        self.assertEqual([Day.parse(c) for c in codes], list(Day))

    def test_invalid_day(self) -> None:
        for bad in ("", None, "XX", "monday"):
            with self.assertRaises(ValidationError):
                Day.parse(bad)


class TestNormalization(unittest.TestCase):
    def test_to_blocks_legacy_record(self) -> None:
        self.assertEqual(
            to_blocks({"day": "MO", "hour": 18, "duration": None}),
            [ScheduleBlock(Day.MO, 18, 2)],
        )

    def test_to_blocks_hour_zero_is_present(self) -> None:
        self.assertEqual(to_blocks({"day": "MO", "hour": 0, "duration": 1}), [ScheduleBlock(Day.MO, 0, 1)])

    def test_to_blocks_without_schedule(self) -> None:
        self.assertEqual(to_blocks({"day": "MO"}), [])
        self.assertEqual(to_blocks(EMPTY_SCHEDULE), [])

    def test_status_exact_mapping(self) -> None:
        self.assertEqual(normalize_status("cursado"), "in_progress")
        self.assertEqual(normalize_status("in_progress"), "in_progress")
        self.assertEqual(normalize_status("no_cursado"), "not_taken")
        # substring look-alikes are not in progress
        self.assertEqual(normalize_status("Cursado"), "Cursado")
        self.assertEqual(normalize_status("cursada"), "cursada")
        self.assertEqual(normalize_status(None), "")


class TestEnrolledCourse(unittest.TestCase):
    def test_from_record_with_nested_name(self) -> None:
        course = EnrolledCourse.from_record(
            {"id": 4, "materia": {"nombre": "Algebra"}, "estado": "cursado", "day": "JU", "hour": 19}
        )
        self.assertEqual(course.course_id, "4")
        self.assertEqual(course.name, "Algebra")
        self.assertTrue(course.in_progress)
        self.assertEqual(course.blocks, (ScheduleBlock(Day.TH, 19, 2),))

    def test_from_record_spanish_flat_keys(self) -> None:
        course = EnrolledCourse.from_record(
            {"id": 5, "nombre": "Dibujo", "estado": "cursado", "dia": "LU", "hora": 10, "duracion": 3, "aula": "B1"}
        )
        self.assertEqual(course.name, "Dibujo")
        self.assertTrue(course.in_progress)
        self.assertEqual(course.blocks, (ScheduleBlock(Day.MO, 10, 3, "B1"),))

    def test_english_keys_win_over_spanish(self) -> None:
        course = EnrolledCourse.from_record(
            {"id": 6, "name": "Drawing", "nombre": "Dibujo", "status": "passed", "estado": "cursado"}
        )
        self.assertEqual(course.name, "Drawing")
        self.assertFalse(course.in_progress)

    def test_schedules_with_spanish_keys(self) -> None:
        self.assertEqual(
            to_blocks({"schedules": [{"dia": "MA", "hora": 8, "duracion": 1}, {"dia": "JU", "hora": 9}]}),
            [ScheduleBlock(Day.TU, 8, 1), ScheduleBlock(Day.TH, 9, 2)],
        )

    def test_from_record_requires_id(self) -> None:
        with self.assertRaises(ValidationError):
            EnrolledCourse.from_record({"name": "Algebra", "status": "in_progress"})


class TestPayload(unittest.TestCase):
    def test_payload_for_other_status_is_sentinel(self) -> None:
        blocks = [ScheduleBlock(Day.MO, 10, 2)]
        self.assertEqual(schedule_payload(blocks, "regular"), EMPTY_SCHEDULE)
        self.assertEqual(schedule_payload(blocks, "cursado"), [blocks[0].to_record()])


if __name__ == "__main__":
    unittest.main()
