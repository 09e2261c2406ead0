from __future__ import annotations

import datetime
import os
import unittest

from dirsnap.errors import DirectoryNotFoundError, InvalidArgumentError
from dirsnap.naming import format_snapshot_name, is_snapshot_name, parse_snapshot_date, snapshot_index
from dirsnap.pathutil import archive_name, dir_entry_name, require_directory


class NamingTests(unittest.TestCase):
    def test_format_zero_pads(self):
        day = datetime.date(2014, 3, 7)
        self.assertEqual(format_snapshot_name(day), "snapshot 2014-03-07.zip")
        self.assertEqual(format_snapshot_name(day, 2), "snapshot 2014-03-07 2.zip")
        self.assertEqual(format_snapshot_name(datetime.date(45, 1, 1)), "snapshot 0045-01-01.zip")

    def test_pattern_matches(self):
        for name in (
            "snapshot 2014-03-07.zip",
            "snapshot 2014-3-7.zip",
            "Snapshot 2014-03-07 12.zip",
            "SNAPSHOT 2014-03-07.ZIP",
            "snapshot 2014-03-07.tar",
            "snapshot 2014-03-07",
        ):
            with self.subTest(name=name):
                self.assertTrue(is_snapshot_name(name))

    def test_pattern_rejects(self):
        for name in (
            "snapshot 14-03-07.zip",
            "snapshot 2014-03-07 backup.zip",
            "old snapshot 2014-03-07.zip",
            "snapshot2014-03-07.zip",
            "notes.txt",
        ):
            with self.subTest(name=name):
                self.assertFalse(is_snapshot_name(name))

    def test_parse_date(self):
        self.assertEqual(parse_snapshot_date("/x/snapshot 2014-03-07 3.zip"), datetime.date(2014, 3, 7))
        self.assertIsNone(parse_snapshot_date("readme.md"))

    def test_invalid_date_raises(self):
        for name in ("snapshot 2014-13-01.zip", "snapshot 2014-02-30.zip", "snapshot 0000-01-01.zip"):
            with self.subTest(name=name):
                self.assertTrue(is_snapshot_name(name))
                with self.assertRaises(ValueError):
                    parse_snapshot_date(name)

    def test_snapshot_index(self):
        self.assertEqual(snapshot_index("snapshot 2014-03-07.zip"), 1)
        self.assertEqual(snapshot_index("snapshot 2014-03-07 10.zip"), 10)


class PathTests(unittest.TestCase):
    def test_archive_names_are_relative_posix(self):
        root = os.path.abspath(os.sep + "data")
        self.assertEqual(archive_name(os.path.join(root, "a", "b.txt"), root), "a/b.txt")
        self.assertEqual(dir_entry_name(os.path.join(root, "a", "c"), root), "a/c/")

    def test_outside_root_rejected(self):
        root = os.path.abspath(os.path.join(os.sep, "data", "root"))
        with self.assertRaises(ValueError):
            archive_name(os.path.join(os.sep, "data", "other.txt"), root)

    def test_require_directory(self):
        with self.assertRaises(InvalidArgumentError):
            require_directory(None)
        with self.assertRaises(InvalidArgumentError):
            require_directory("")
        with self.assertRaises(DirectoryNotFoundError):
            require_directory(os.path.join(os.sep, "definitely", "not", "here"))


if __name__ == "__main__":
    unittest.main()
