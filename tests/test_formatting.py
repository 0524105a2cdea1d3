from __future__ import annotations

import unittest
from datetime import datetime

from videocatalog.formatting import (
    format_date,
    format_duration,
    format_file_size,
    format_number,
    slugify,
    truncate_text,
)


class FormattingTests(unittest.TestCase):
    def test_format_duration_minutes_and_hours(self) -> None:
        self.assertEqual(format_duration(634), "10:34")
        self.assertEqual(format_duration(59), "00:59")
        self.assertEqual(format_duration(3725), "01:02:05")

    def test_format_duration_invalid_input(self) -> None:
        self.assertEqual(format_duration(0), "00:00")
        self.assertEqual(format_duration(None), "00:00")
        self.assertEqual(format_duration("abc"), "00:00")

    def test_format_number(self) -> None:
        self.assertEqual(format_number(12500), "12,500")
        self.assertEqual(format_number("1234.6"), "1,235")
        self.assertEqual(format_number(None), "0")
        self.assertEqual(format_number("abc"), "0")

    def test_format_date_relative(self) -> None:
        now = datetime(2024, 1, 20, 12, 0, 0)
        self.assertEqual(format_date("2024-01-20T11:59:30", now), "Just now")
        self.assertEqual(format_date("2024-01-20T11:59:00", now), "1 minute ago")
        self.assertEqual(format_date("2024-01-20T11:55:00", now), "5 minutes ago")
        self.assertEqual(format_date("2024-01-20T09:00:00", now), "3 hours ago")
        self.assertEqual(format_date("2024-01-19", now), "Yesterday")
        self.assertEqual(format_date("2024-01-15", now), "5 days ago")
        self.assertEqual(format_date("2024-01-05", now), "2 weeks ago")
        self.assertEqual(format_date("2023-10-01", now), "3 months ago")
        self.assertEqual(format_date("2021-01-20", now), "3 years ago")

    def test_format_date_missing_or_invalid(self) -> None:
        self.assertEqual(format_date(""), "Unknown date")
        self.assertEqual(format_date(None), "Unknown date")
        self.assertEqual(format_date("not a date"), "Invalid date")

    def test_format_file_size(self) -> None:
        self.assertEqual(format_file_size(0), "0 Bytes")
        self.assertEqual(format_file_size(500), "500 Bytes")
        self.assertEqual(format_file_size(1536), "1.5 KB")
        self.assertEqual(format_file_size(1048576), "1 MB")

    def test_truncate_and_slugify(self) -> None:
        self.assertEqual(truncate_text("hello world", 8), "hello...")
        self.assertEqual(truncate_text("short", 10), "short")
        self.assertEqual(slugify("Jane Doe"), "jane-doe")


if __name__ == "__main__":
    unittest.main()
