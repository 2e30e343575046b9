import unittest
from datetime import date, datetime

from mealplanner.services.week_utils import format_date, next_week_start, parse_week_start, week_start


class TestWeekUtils(unittest.TestCase):
    def test_week_start_is_monday(self):
        # 2024-07-03 is a Wednesday
        self.assertEqual(week_start(date(2024, 7, 3)), date(2024, 7, 1))
        self.assertEqual(week_start(date(2024, 7, 1)), date(2024, 7, 1))
        self.assertEqual(week_start(date(2024, 7, 7)), date(2024, 7, 1))

    def test_datetime_input(self):
        self.assertEqual(week_start(datetime(2024, 7, 5, 23, 30)), date(2024, 7, 1))

    def test_today(self):
        self.assertEqual(week_start().weekday(), 0)

    def test_next_week_start(self):
        self.assertEqual(next_week_start(date(2024, 12, 30)), date(2025, 1, 6))
        self.assertEqual(next_week_start(date(2024, 7, 7)), date(2024, 7, 8))

    def test_format_date(self):
        self.assertEqual(format_date(date(2024, 7, 1)), "2024-07-01")
        self.assertEqual(format_date(datetime(2024, 7, 1, 8, 0)), "2024-07-01")

    def test_parse_week_start(self):
        self.assertEqual(parse_week_start("2024-07-01"), "2024-07-01")
        self.assertEqual(parse_week_start("2024-07-04"), "2024-07-01")
        self.assertEqual(parse_week_start("2024-07-04T10:00:00.000Z"), "2024-07-01")

    def test_parse_week_start_invalid(self):
        for value in ("", "history", "2024-13-01", "07/01/2024"):
            with self.assertRaises(ValueError):
                parse_week_start(value)


if __name__ == '__main__':
    unittest.main()
