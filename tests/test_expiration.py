import unittest
from datetime import date, datetime, timedelta

from stockdash.core.constants import EXPIRATION_STATUSES
from stockdash.core.errors import ValidationError
from stockdash.core.expiration import classify_expiration, days_until


class ExpirationTest(unittest.TestCase):
    today = datetime(2024, 6, 10, 15, 30)

    def test_boundaries(self):
        cases = [
            ("2024-06-09", -1, "expired"),
            ("2024-06-10", 0, "near_expiry"),
            ("2024-06-17", 7, "near_expiry"),
            ("2024-06-18", 8, "current"),
        ]
        for expiration, days, status in cases:
            with self.subTest(expiration=expiration):
                self.assertEqual(days_until(expiration, self.today), days)
                self.assertEqual(classify_expiration(expiration, self.today), status)

    def test_expired_product(self):
        self.assertEqual(days_until("2024-06-05", self.today), -5)
        self.assertEqual(classify_expiration("2024-06-05", self.today), "expired")

    def test_time_of_day_does_not_matter(self):
        for reference in (
            datetime(2024, 6, 10, 0, 0),
            datetime(2024, 6, 10, 23, 59, 59, 999999),
            date(2024, 6, 10),
        ):
            with self.subTest(reference=reference):
                self.assertEqual(days_until("2024-06-10", reference), 0)
                self.assertEqual(days_until("2024-06-09", reference), -1)

    def test_accepts_date_objects(self):
        self.assertEqual(days_until(date(2024, 6, 17), self.today), 7)

    def test_crosses_month_and_leap_day(self):
        self.assertEqual(days_until("2024-03-01", date(2024, 2, 28)), 2)
        self.assertEqual(days_until("2023-12-31", date(2024, 1, 1)), -1)

    def test_classification_matches_day_count(self):
        start = date(2024, 6, 10)
        for offset in range(-40, 41):
            expiration = (start + timedelta(days=offset)).isoformat()
            with self.subTest(offset=offset):
                days = days_until(expiration, start)
                status = classify_expiration(expiration, start)
                self.assertEqual(days, offset)
                self.assertIn(status, EXPIRATION_STATUSES)
                if days < 0:
                    self.assertEqual(status, "expired")
                elif days <= 7:
                    self.assertEqual(status, "near_expiry")
                else:
                    self.assertEqual(status, "current")

    def test_repeat_calls_agree(self):
        first = classify_expiration("2024-06-12", self.today)
        second = classify_expiration("2024-06-12", self.today)
        self.assertEqual(first, second)

    def test_overflowing_parts_roll_over(self):
        reference = date(2024, 2, 28)
        cases = [
            ("2024-02-30", date(2024, 3, 1)),
            ("2023-02-29", date(2023, 3, 1)),
            ("2024-13-01", date(2025, 1, 1)),
            ("2024-06-00", date(2024, 5, 31)),
        ]
        for value, rolled in cases:
            with self.subTest(value=value):
                self.assertEqual(days_until(value, reference), (rolled - reference).days)
        self.assertEqual(days_until("2024-02-30", reference), 2)
        self.assertEqual(classify_expiration("2024-02-30", reference), "near_expiry")

    def test_rejects_malformed_dates(self):
        for value in ("", "2024-2-3", "10/06/2024", "tomorrow", None):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    classify_expiration(value, self.today)


if __name__ == "__main__":
    unittest.main()
