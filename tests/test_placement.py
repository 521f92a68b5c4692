"""Tests for clone placement decisions."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from git_smart_clone.models import PlacementMode
from git_smart_clone.placement import resolve
from git_smart_clone.urls import parse_repository


class ResolveTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.repo = parse_repository("https://github.com/acme/foo")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_no_workspace_clones_into_home(self) -> None:
        home = self.root / "home"

        placement = resolve(self.repo, None, home=home)

        self.assertIs(placement.mode, PlacementMode.NEW_IN_HOME)
        self.assertEqual(placement.target_path, home / "foo")
        self.assertIn("home directory", placement.prompt_message)

    def test_no_workspace_defaults_to_user_home(self) -> None:
        placement = resolve(self.repo)

        self.assertEqual(placement.target_path, Path.home() / "foo")

    def test_project_workspace_gets_new_subfolder(self) -> None:
        (self.root / "package.json").write_text("{}")

        placement = resolve(self.repo, self.root)

        self.assertIs(placement.mode, PlacementMode.NEW_SUBFOLDER)
        self.assertEqual(placement.target_path, self.root / "foo")
        self.assertFalse(placement.clone_to_root)
        self.assertIn("new folder", placement.prompt_message)

    def test_subfolder_avoids_existing_paths(self) -> None:
        (self.root / "package.json").write_text("{}")
        (self.root / "foo").mkdir()

        self.assertEqual(resolve(self.repo, self.root).target_path, self.root / "foo-1")

        (self.root / "foo-1").mkdir()
        self.assertEqual(resolve(self.repo, self.root).target_path, self.root / "foo-2")

    def test_clean_workspace_merges_into_root(self) -> None:
        placement = resolve(self.repo, self.root)

        self.assertIs(placement.mode, PlacementMode.MERGE_INTO_ROOT)
        self.assertEqual(placement.target_path, self.root)
        self.assertTrue(placement.clone_to_root)
        self.assertIn("workspace root", placement.prompt_message)

    def test_non_marker_folder_does_not_block_merge(self) -> None:
        (self.root / "foo").mkdir()

        placement = resolve(self.repo, self.root)

        self.assertIs(placement.mode, PlacementMode.MERGE_INTO_ROOT)

    def test_unreadable_workspace_never_merges(self) -> None:
        missing = self.root / "missing"

        with self.assertLogs("git_smart_clone.fs", level="WARNING"):
            placement = resolve(self.repo, missing)

        self.assertIs(placement.mode, PlacementMode.NEW_SUBFOLDER)
        self.assertEqual(placement.target_path, missing / "foo")

    def test_reserve_claims_the_subfolder(self) -> None:
        (self.root / "src").mkdir()

        placement = resolve(self.repo, self.root, reserve=True)

        self.assertEqual(placement.target_path, self.root / "foo")
        self.assertTrue(placement.target_path.is_dir())

    def test_custom_markers(self) -> None:
        (self.root / "package.json").write_text("{}")

        placement = resolve(self.repo, self.root, marker_files=["flake.nix"], marker_dirs=[])

        self.assertIs(placement.mode, PlacementMode.MERGE_INTO_ROOT)


if __name__ == "__main__":
    unittest.main()
