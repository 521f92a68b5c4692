"""Tests for workspace inspection and free-path selection."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from git_smart_clone.fs import detect_project, next_free_path


class DetectProjectTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_empty_directory_has_no_markers(self) -> None:
        result = detect_project(self.root)

        self.assertFalse(result.has_markers)
        self.assertEqual(result.markers, ())

    def test_unrelated_entries_are_ignored(self) -> None:
        (self.root / "notes.txt").write_text("hi")
        (self.root / "photos").mkdir()

        self.assertFalse(detect_project(self.root).has_markers)

    def test_reports_files_then_directories(self) -> None:
        (self.root / "src").mkdir()
        (self.root / "README.md").write_text("# demo")
        (self.root / "package.json").write_text("{}")

        result = detect_project(self.root)

        self.assertTrue(result.has_markers)
        self.assertEqual(result.markers, ("package.json", "README.md", "src/"))

    def test_marker_kind_must_match(self) -> None:
        (self.root / "package.json").mkdir()
        (self.root / "src").write_text("not a directory")

        self.assertFalse(detect_project(self.root).has_markers)

    def test_git_file_counts_as_marker(self) -> None:
        (self.root / ".git").write_text("gitdir: /elsewhere/.git/worktrees/demo\n")

        self.assertEqual(detect_project(self.root).markers, (".git",))

    def test_custom_marker_lists(self) -> None:
        (self.root / "flake.nix").write_text("{}")
        (self.root / "package.json").write_text("{}")

        result = detect_project(self.root, marker_files=["flake.nix"], marker_dirs=[])

        self.assertEqual(result.markers, ("flake.nix",))

    def test_unreadable_directory_fails_safe(self) -> None:
        with self.assertLogs("git_smart_clone.fs", level="WARNING"):
            result = detect_project(self.root / "missing")

        self.assertTrue(result.has_markers)
        self.assertEqual(result.markers, ())

    def test_file_instead_of_directory_fails_safe(self) -> None:
        path = self.root / "file.txt"
        path.write_text("x")

        with self.assertLogs("git_smart_clone.fs", level="WARNING"):
            self.assertTrue(detect_project(path).has_markers)


class NextFreePathTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_plain_name_when_free(self) -> None:
        self.assertEqual(next_free_path(self.root, "foo"), self.root / "foo")
        self.assertFalse((self.root / "foo").exists())

    def test_counts_up_past_existing_entries(self) -> None:
        (self.root / "foo").mkdir()
        self.assertEqual(next_free_path(self.root, "foo"), self.root / "foo-1")

        (self.root / "foo-1").write_text("taken by a file")
        self.assertEqual(next_free_path(self.root, "foo"), self.root / "foo-2")

    def test_first_available_suffix_wins(self) -> None:
        (self.root / "foo").mkdir()
        (self.root / "foo-2").mkdir()

        self.assertEqual(next_free_path(self.root, "foo"), self.root / "foo-1")

    def test_reserve_creates_the_directory(self) -> None:
        (self.root / "foo").mkdir()

        first = next_free_path(self.root, "foo", reserve=True)
        second = next_free_path(self.root, "foo", reserve=True)

        self.assertEqual(first, self.root / "foo-1")
        self.assertEqual(second, self.root / "foo-2")
        self.assertTrue(first.is_dir())
        self.assertTrue(second.is_dir())

    def test_reserve_falls_back_when_parent_is_missing(self) -> None:
        parent = self.root / "missing"

        with self.assertLogs("git_smart_clone.fs", level="WARNING"):
            result = next_free_path(parent, "foo", reserve=True)

        self.assertEqual(result, parent / "foo")
        self.assertFalse(parent.exists())


if __name__ == "__main__":
    unittest.main()
