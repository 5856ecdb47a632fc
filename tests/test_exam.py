import unittest

from resultdesk.core.errors import InvalidArgument, WarningCode
from resultdesk.core.exam import compute_exam
from resultdesk.core.grade_scale import LETTER
from resultdesk.core.models import ClassConfig

from sample_data import SCIENCE_CONFIG


class ComputeExamTests(unittest.TestCase):
    def test_absent_subject_counts_zero_against_full_marks(self):
        result = compute_exam("s1", "T1", {"Math": 90, "Sci": "AB"}, SCIENCE_CONFIG, LETTER)
        self.assertEqual(result.total_obtained, 90)
        self.assertEqual(result.total_full, 150)
        self.assertEqual(result.percent, 60.0)
        self.assertEqual(result.grade, "B")
        self.assertEqual(result.subject("Sci").display, "AB")
        self.assertIsNone(result.rank)
        self.assertIsNone(result.class_size)

    def test_default_full_marks(self):
        config = ClassConfig("7", subjects=("Art",), terms=("T1",))
        result = compute_exam("s1", "T1", {"Art": 85}, config)
        self.assertEqual(result.subjects[0].full, 100)
        self.assertEqual(result.percent, 85)

    def test_all_absent_forces_zero(self):
        result = compute_exam("s1", "T1", {"Math": "ab", "Sci": "AB"}, SCIENCE_CONFIG)
        self.assertEqual(result.percent, 0.0)
        self.assertEqual(result.total_full, 150)
        self.assertTrue(result.all_absent)

        nothing = compute_exam("s1", "T1", None, SCIENCE_CONFIG)
        self.assertEqual(nothing.percent, 0.0)
        self.assertFalse(nothing.has_data)

    def test_subjects_follow_config_order(self):
        result = compute_exam("s1", "T1", {"Sci": 40, "Math": 50}, SCIENCE_CONFIG)
        self.assertEqual([s.subject for s in result.subjects], ["Math", "Sci"])

    def test_unconfigured_subject_is_ignored_with_warning(self):
        result = compute_exam("s1", "T1", {"Math": 50, "Music": 99}, SCIENCE_CONFIG)
        self.assertEqual(result.total_obtained, 50)
        codes = [w.code for w in result.warnings]
        self.assertEqual(codes, [WarningCode.UNKNOWN_SUBJECT])
        self.assertEqual(result.warnings[0].subject, "Music")

    def test_mark_warnings_carry_student_and_term(self):
        result = compute_exam("s9", "T1", {"Math": "??", "Sci": 70}, SCIENCE_CONFIG)
        self.assertEqual(result.subject("Sci").obtained, 50)
        self.assertEqual(
            sorted(w.code.value for w in result.warnings),
            ["INVALID_MARK", "MARK_OUT_OF_RANGE"],
        )
        for warning in result.warnings:
            self.assertEqual(warning.student_id, "s9")
            self.assertEqual(warning.term, "T1")

    def test_unknown_term_returns_zeroed_result(self):
        result = compute_exam("s1", "T9", {"Math": 90}, SCIENCE_CONFIG)
        self.assertEqual(result.subjects, ())
        self.assertEqual(result.total_obtained, 0)
        self.assertEqual(result.total_full, 0)
        self.assertEqual(result.percent, 0)
        self.assertIs(result.warnings[0].code, WarningCode.UNKNOWN_TERM)

    def test_empty_config(self):
        config = ClassConfig("8", subjects=(), terms=("T1",))
        result = compute_exam("s1", "T1", {}, config)
        self.assertEqual(result.subjects, ())
        self.assertEqual(result.percent, 0.0)

    def test_caller_errors(self):
        with self.assertRaises(InvalidArgument):
            compute_exam("s1", 1, {}, SCIENCE_CONFIG)
        with self.assertRaises(InvalidArgument):
            compute_exam(None, "T1", {}, SCIENCE_CONFIG)

    def test_idempotent(self):
        marks = {"Math": "77", "Sci": "ab"}
        first = compute_exam("s1", "T1", marks, SCIENCE_CONFIG, roll=4)
        second = compute_exam("s1", "T1", marks, SCIENCE_CONFIG, roll=4)
        self.assertEqual(first, second)


class ClassConfigTests(unittest.TestCase):
    def test_from_dict_accepts_legacy_shape(self):
        config = ClassConfig.from_dict(
            {
                "class": "9",
                "subjects": [{"id": "math", "name": "Mathematics"}, "Science", "Science"],
                "terms": ["Half Yearly"],
                "examsFullMarks": {"Half Yearly": {"math": 80, "Science": 0}},
            }
        )
        self.assertEqual(config.subjects, ("math", "Science"))
        self.assertEqual(config.full_marks_for("Half Yearly", "math"), 80)
        self.assertEqual(config.full_marks_for("Half Yearly", "Science"), 100)
        self.assertEqual(config.full_marks_for("Annual", "math"), 100)

    def test_missing_lists_are_empty(self):
        config = ClassConfig.from_dict({"class": "10"})
        self.assertEqual(config.subjects, ())
        self.assertEqual(config.terms, ())

    def test_non_mapping_marks_are_not_entered(self):
        result = compute_exam("s1", "T1", ["40", "AB"], SCIENCE_CONFIG)
        self.assertEqual(result.total_obtained, 0)
        self.assertEqual(result.total_full, 150)
        self.assertFalse(result.has_data)
        self.assertEqual([w.code for w in result.warnings], [WarningCode.MALFORMED_MARKS])
        self.assertEqual(result.warnings[0].student_id, "s1")


if __name__ == "__main__":
    unittest.main()
