"""Unit tests for git output parsing and revision selection.

None of these spawn git; they exercise the pure helpers around it.
"""

from __future__ import annotations

import unittest
from pathlib import Path

from lazydiff.errors import GitError
from lazydiff.git import (
    Commit,
    UNCOMMITTED_HASH,
    Worktree,
    decode_content,
    diff_revisions,
    find_current_worktree,
    mark_current,
    next_context_lines,
    parse_log_output,
    parse_worktree_output,
    selection_summary,
    set_all_selected,
    toggle_commit,
)

WORKTREE_PORCELAIN = """\
worktree /repo
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /repo/.worktrees/feature
HEAD 2222222222222222222222222222222222222222
branch refs/heads/feature/login

worktree /tmp/detached
HEAD 3333333333333333333333333333333333333333
detached
"""


def _commits() -> list[Commit]:
    return [
        Commit(UNCOMMITTED_HASH, "", "(uncommitted changes)", is_uncommitted=True),
        Commit("abcdef1", "abcdef1" + "0" * 33, "Add login"),
        Commit("1234567", "1234567" + "0" * 33, "Fix typo"),
    ]


class WorktreeParsingTests(unittest.TestCase):
    def test_parses_porcelain_records(self) -> None:
        worktrees = parse_worktree_output(WORKTREE_PORCELAIN)

        self.assertEqual([item.path for item in worktrees], [
            Path("/repo"),
            Path("/repo/.worktrees/feature"),
            Path("/tmp/detached"),
        ])
        self.assertEqual(worktrees[1].branch, "feature/login")
        self.assertIsNone(worktrees[2].branch)
        self.assertEqual(worktrees[2].label, "(detached 3333333)")

    def test_longest_prefix_wins(self) -> None:
        worktrees = parse_worktree_output(WORKTREE_PORCELAIN)

        self.assertEqual(find_current_worktree(worktrees, Path("/repo/.worktrees/feature/src")), 1)
        self.assertEqual(find_current_worktree(worktrees, Path("/repo/src")), 0)
        self.assertIsNone(find_current_worktree(worktrees, Path("/elsewhere")))
        marked = mark_current(worktrees, Path("/repo/.worktrees/feature"))
        self.assertEqual([item.is_current for item in marked], [False, True, False])

    def test_label_prefers_branch(self) -> None:
        self.assertEqual(Worktree(Path("/x"), branch="main").label, "main")
        self.assertEqual(Worktree(Path("/x")).label, "(detached)")


class CommitSelectionTests(unittest.TestCase):
    def test_parse_log_output(self) -> None:
        full = "f" * 40
        commits = parse_log_output(f"{full}\0Subject with spaces\nbroken line\n")

        self.assertEqual(len(commits), 1)
        self.assertEqual(commits[0].hash, "fffffff")
        self.assertEqual(commits[0].subject, "Subject with spaces")
        self.assertTrue(commits[0].selected)

    def test_toggle_and_select_all_return_new_lists(self) -> None:
        commits = _commits()
        toggled = toggle_commit(commits, 1)

        self.assertTrue(commits[1].selected)
        self.assertFalse(toggled[1].selected)
        self.assertEqual(toggle_commit(commits, 9), commits)
        self.assertFalse(any(item.selected for item in set_all_selected(commits, False)))

    def test_selection_summary(self) -> None:
        commits = _commits()

        self.assertEqual(selection_summary(commits), "all 3 commits")
        self.assertEqual(selection_summary(toggle_commit(commits, 0)), "2/3 commits")
        self.assertEqual(selection_summary(set_all_selected(commits, False)), "nothing selected")
        self.assertEqual(selection_summary([]), "no commits")


class DiffRevisionTests(unittest.TestCase):
    def test_commits_and_worktree_diff_against_base(self) -> None:
        self.assertEqual(diff_revisions("main", _commits()), (["main"], "main", True))

    def test_uncommitted_only_diffs_against_head(self) -> None:
        commits = [_commits()[0]]

        self.assertEqual(diff_revisions("main", commits), (["HEAD"], "HEAD", True))

    def test_commits_only_uses_range(self) -> None:
        commits = toggle_commit(_commits(), 0)

        self.assertEqual(diff_revisions("main", commits), (["main..HEAD"], "main", False))

    def test_nothing_selected(self) -> None:
        self.assertIsNone(diff_revisions("main", set_all_selected(_commits(), False)))

    def test_context_line_cycle(self) -> None:
        self.assertEqual([next_context_lines(n) for n in (3, 1, 0, 5)], [1, 0, 3, 3])


class DecodeContentTests(unittest.TestCase):
    def test_splits_lines_without_trailing_empty(self) -> None:
        self.assertEqual(decode_content(b"a\nb\n"), ("a", "b"))
        self.assertEqual(decode_content(b"a\nb"), ("a", "b"))
        self.assertEqual(decode_content(b""), ())

    def test_binary_and_missing_are_none(self) -> None:
        self.assertIsNone(decode_content(None))
        self.assertIsNone(decode_content(b"\x00\x01"))
        self.assertIsNone(decode_content(b"\xff\xfe bad"))


class GitErrorTests(unittest.TestCase):
    def test_message_includes_last_stderr_line(self) -> None:
        error = GitError("git diff exited with status 128", ["diff"], "warning\nfatal: bad revision")

        self.assertEqual(str(error), "git diff exited with status 128: fatal: bad revision")
        self.assertEqual(error.git_args, ["diff"])


if __name__ == "__main__":
    unittest.main()
