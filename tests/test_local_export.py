#!/usr/bin/env python3
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
"""
Unit tests for the local export categorizer.
"""

import shutil
import tempfile
import unittest
from io import StringIO
from unittest.mock import patch

from local_export import (
    CategorizationError,
    LocalExporter,
    categorize_item,
    date_folder,
    format_report,
    read_url,
    sanitize_title,
    shortcut_name,
    size_tier,
)
from models import PocketItem


def make_item(**fields):
    defaults = {
        "item_id": "100",
        "resolved_title": "A Title",
        "word_count": 100,
        "status": "0",
        "time_read": 0,
        "time_added": 1625097600,  # 2021-07-01T00:00:00Z
        "has_video": "0",
    }
    defaults.update(fields)
    return PocketItem(**defaults)


class TestSizeTier(unittest.TestCase):
    def test_tiers(self):
        cases = [
            (0, "tiny"),
            (499, "tiny"),
            (500, "small"),
            (1999, "small"),
            (2000, "short"),
            (4999, "short"),
            (5000, "normal"),
            (9999, "normal"),
            (10000, "large"),
            (14999, "large"),
            (15000, "huge"),
            (250000, "huge"),
        ]
        for word_count, expected in cases:
            with self.subTest(word_count=word_count):
                self.assertEqual(size_tier(word_count), expected)


class TestCategorizeItem(unittest.TestCase):
    def test_full_categorization(self):
        item = make_item(status="1", time_read=1625200000, has_video="1", word_count=3000)
        self.assertEqual(
            categorize_item(item),
            ["all", "archived", "read", "has_video", "short", "by_date/2021/july"],
        )

    def test_status_folders(self):
        for status, folder in (("0", "list"), ("1", "archived"), ("2", "to_be_deleted")):
            with self.subTest(status=status):
                self.assertIn(folder, categorize_item(make_item(status=status)))

    def test_unknown_status_raises(self):
        with self.assertRaises(CategorizationError):
            categorize_item(make_item(status="7"))
        with self.assertRaises(CategorizationError):
            categorize_item(make_item(status=None))

    def test_video_folders(self):
        self.assertIn("is_video", categorize_item(make_item(has_video="2")))
        folders = categorize_item(make_item(has_video="0"))
        self.assertNotIn("has_video", folders)
        self.assertNotIn("is_video", folders)

    def test_unknown_video_value_raises(self):
        with self.assertRaises(CategorizationError):
            categorize_item(make_item(has_video="9"))

    def test_exactly_one_folder_per_dimension(self):
        folders = categorize_item(make_item())
        self.assertEqual(folders[0], "all")
        self.assertEqual(len([f for f in folders if f in ("list", "archived", "to_be_deleted")]), 1)
        self.assertEqual(len([f for f in folders if f in ("read", "unread")]), 1)
        self.assertEqual(len([f for f in folders if f.startswith("by_date/")]), 1)
        self.assertEqual(len(folders), len(set(folders)))

    def test_date_folder_uses_utc(self):
        # 2020-12-31T23:30:00Z; a local timezone east of UTC would give january
        self.assertEqual(date_folder(1609457400), "by_date/2020/december")
        self.assertEqual(date_folder(0), "by_date/1970/january")

    def test_out_of_range_time_added_raises(self):
        with self.assertRaises(CategorizationError):
            categorize_item(make_item(time_added=10**12))


class TestSanitizeTitle(unittest.TestCase):
    def test_replaces_non_letters(self):
        self.assertEqual(sanitize_title("Hello, World! 2021"), "Hello__World")

    def test_strips_underscores(self):
        self.assertEqual(sanitize_title("__A b__"), "A_b")
        self.assertEqual(sanitize_title("  (Title)  "), "Title")

    def test_non_ascii_letters_are_replaced(self):
        self.assertEqual(sanitize_title("Café au lait"), "Caf__au_lait")

    def test_truncates(self):
        self.assertEqual(len(sanitize_title("a" * 400)), 231)

    def test_empty_title(self):
        self.assertEqual(sanitize_title(None), "")
        self.assertEqual(sanitize_title("123"), "")

    def test_idempotent(self):
        for title in ("Already_Clean", "a_b_c", "x" * 231, "Word"):
            with self.subTest(title=title):
                self.assertEqual(sanitize_title(sanitize_title(title)), sanitize_title(title))
                self.assertEqual(sanitize_title(title), title)

    def test_shortcut_name(self):
        item = make_item(item_id="42", resolved_title="Why Python?")
        self.assertEqual(shortcut_name(item), "42 - Why_Python.url")


class TestFormatReport(unittest.TestCase):
    def test_report_lines(self):
        counts = {"all": 4, "list": 3, "tiny": 1, "archived": 1}
        self.assertEqual(
            format_report(counts),
            [
                "Number of items in each category:",
                " - all: 4 (100.00%)",
                " - list: 3 (75.00%)",
                " - archived: 1 (25.00%)",
                " - tiny: 1 (25.00%)",
            ],
        )

    def test_empty_report(self):
        self.assertEqual(format_report({}), ["Number of items in each category:"])


class TestLocalExporter(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.items = [
            make_item(item_id="1", resolved_title="First: Post", word_count=100,
                      status="0", time_read=0, has_video="0"),
            make_item(item_id="2", resolved_title="Second", word_count=3000,
                      status="1", time_read=1625200000, has_video="1",
                      time_added=1577836800),  # 2020-01-01
            make_item(item_id="3", resolved_title="Third", word_count=20000,
                      status="2", time_read=1625200000, has_video="2"),
        ]

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_writes_shortcuts(self):
        exporter = LocalExporter(self.tmpdir)
        self.assertFalse(exporter.dry_run)

        with patch("sys.stdout", new_callable=StringIO) as stdout:
            counts = exporter.export(self.items)

        self.assertEqual(stdout.getvalue(), "")
        self.assertEqual(counts["all"], 3)
        shortcut = os.path.join(self.tmpdir, "all", "1 - First__Post.url")
        with open(shortcut, "r", encoding="utf-8") as f:
            self.assertEqual(
                f.read(), "[InternetShortcut]\nURL=https://getpocket.com/a/read/1\n"
            )
        self.assertTrue(
            os.path.exists(os.path.join(self.tmpdir, "by_date", "2020", "january", "2 - Second.url"))
        )
        self.assertTrue(os.path.exists(os.path.join(self.tmpdir, "is_video", "3 - Third.url")))
        self.assertTrue(os.path.exists(os.path.join(self.tmpdir, "huge", "3 - Third.url")))
        self.assertEqual(len(os.listdir(os.path.join(self.tmpdir, "all"))), 3)

    def test_counts_never_exceed_all(self):
        counts = LocalExporter(self.tmpdir).export(self.items)
        for category, count in counts.items():
            self.assertLessEqual(count, counts["all"], category)

    @patch("local_export.logger")
    def test_unwritable_directory_falls_back_to_dry_run(self, mock_logger):
        exporter = LocalExporter(os.path.join(self.tmpdir, "missing"))

        self.assertTrue(exporter.dry_run)
        mock_logger.warning.assert_called()

        with patch("sys.stdout", new_callable=StringIO) as stdout:
            counts = exporter.export(self.items)

        lines = stdout.getvalue().splitlines()
        self.assertEqual(len(lines), 3)
        self.assertEqual(
            lines[0],
            f"{read_url('1')} to be saved to folders: "
            "all, list, unread, tiny, by_date/2021/july",
        )
        self.assertEqual(counts["all"], 3)
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir, "missing")))

    def test_file_system_errors_propagate(self):
        # A plain file where a category folder should go
        with open(os.path.join(self.tmpdir, "all"), "w") as f:
            f.write("")
        with self.assertRaises(OSError):
            LocalExporter(self.tmpdir).export(self.items)


if __name__ == "__main__":
    unittest.main()
