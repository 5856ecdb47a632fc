import unittest

from resultdesk.core.errors import InvalidArgument
from resultdesk.core.grade_scale import LETTER, NINE_POINT, GradeScale, get_scale, grade_for


class GradeScaleTests(unittest.TestCase):
    def test_nine_point_boundaries(self):
        self.assertEqual(grade_for(90, NINE_POINT), "A1")
        self.assertEqual(grade_for(89.99, NINE_POINT), "A2")
        self.assertEqual(grade_for(80, NINE_POINT), "A2")
        self.assertEqual(grade_for(70, NINE_POINT), "B1")
        self.assertEqual(grade_for(60, NINE_POINT), "B2")
        self.assertEqual(grade_for(50, NINE_POINT), "C1")
        self.assertEqual(grade_for(40, NINE_POINT), "C2")
        self.assertEqual(grade_for(33, NINE_POINT), "D")
        self.assertEqual(grade_for(32.9, NINE_POINT), "E (Needs Improvement)")
        self.assertEqual(grade_for(0, NINE_POINT), "E (Needs Improvement)")

    def test_letter_boundaries(self):
        cases = [
            (90, "A+"), (89.99, "A"),
            (80, "A"), (79.99, "B+"),
            (70, "B+"), (69.99, "B"),
            (60, "B"), (59.99, "C"),
            (50, "C"), (49.99, "D"),
            (40, "D"), (39.99, "F"),
        ]
        for percent, expected in cases:
            with self.subTest(percent=percent):
                self.assertEqual(grade_for(percent, LETTER), expected)

    def test_scales_stay_distinct(self):
        self.assertEqual(grade_for(75, NINE_POINT), "B1")
        self.assertEqual(grade_for(75, LETTER), "B+")
        self.assertEqual(NINE_POINT.grade_for(35), "D")
        self.assertEqual(LETTER.grade_for(35), "F")

    def test_out_of_range_percentages(self):
        self.assertEqual(grade_for(120, NINE_POINT), "A1")
        self.assertEqual(grade_for(-5, LETTER), "F")

    def test_nan_returns_sentinel(self):
        self.assertEqual(grade_for(float("nan"), NINE_POINT), "N/A")
        self.assertEqual(grade_for(None, LETTER), "N/A")

    def test_get_scale(self):
        self.assertIs(get_scale("letter"), LETTER)
        self.assertIs(get_scale("Nine-Point"), NINE_POINT)
        with self.assertRaises(InvalidArgument):
            get_scale("gpa")

    def test_boundaries_must_descend(self):
        with self.assertRaises(InvalidArgument):
            GradeScale("broken", ((50, "P"), (60, "Q")), "F")
        with self.assertRaises(InvalidArgument):
            GradeScale("blank", ((50, ""),), "F")


if __name__ == "__main__":
    unittest.main()
