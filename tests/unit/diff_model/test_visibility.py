"""Tests for hidden-file classification and collapse snapshots."""

from __future__ import annotations

import unittest

from lazydiff.diff_model import (
    DiffMode,
    FileDiff,
    hidden_count,
    is_hidden_path,
    visible_files,
)


class HiddenPathTests(unittest.TestCase):
    def test_dotfiles_and_dot_folders_are_hidden(self) -> None:
        self.assertTrue(is_hidden_path(".gitignore"))
        self.assertTrue(is_hidden_path(".github/workflows/ci.yml"))
        self.assertTrue(is_hidden_path("src/.env"))
        self.assertFalse(is_hidden_path("src/app.py"))

    def test_lock_files_are_hidden(self) -> None:
        self.assertTrue(is_hidden_path("go.sum"))
        self.assertTrue(is_hidden_path("web/package-lock.json"))
        self.assertTrue(is_hidden_path("Cargo.lock"))
        self.assertFalse(is_hidden_path("docs/lock.md"))


class VisibleFilesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.files = [FileDiff("a.py"), FileDiff(".env"), FileDiff("yarn.lock"), FileDiff("b.py")]

    def test_filters_hidden_unless_shown(self) -> None:
        self.assertEqual([item.path for item in visible_files(self.files, False)], ["a.py", "b.py"])
        self.assertEqual(len(visible_files(self.files, True)), 4)
        self.assertEqual(hidden_count(self.files, False), 2)
        self.assertEqual(hidden_count(self.files, True), 0)

    def test_collapse_flags_follow_side_table(self) -> None:
        shown = visible_files(self.files, False, {"b.py"})

        self.assertFalse(shown[0].collapsed)
        self.assertTrue(shown[1].collapsed)
        self.assertIs(shown[0], self.files[0])
        self.assertFalse(self.files[3].collapsed)


class DiffModeTests(unittest.TestCase):
    def test_mode_cycle_visits_every_layout(self) -> None:
        mode = DiffMode.SIDE_BY_SIDE
        seen = []
        for _ in range(3):
            seen.append(mode)
            mode = mode.next()

        self.assertEqual(mode, DiffMode.SIDE_BY_SIDE)
        self.assertEqual(set(seen), set(DiffMode))


if __name__ == "__main__":
    unittest.main()
