"""Repository-bound facade the session loads data through."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..diff_model import FileDiff
from ..errors import StartupError
from .commits import Commit, list_commits
from .diff import compute_diff
from .worktree import (
    Worktree,
    current_branch,
    find_repo_root,
    get_main_branch,
    list_worktrees,
    mark_current,
    resolve_base,
)


@dataclass
class GitSource:
    repo_root: Path
    base: str

    @classmethod
    def open(cls, path: Path, base: str | None = None) -> GitSource:
        """Locate the repository containing ``path`` and pick a base branch.

        Raises ``StartupError`` when ``path`` is not inside a repository or an
        explicit ``base`` names no commit.
        """
        repo_root = find_repo_root(path)
        if repo_root is None:
            raise StartupError(f"not a git repository: {path}")
        if base is None:
            return cls(repo_root, get_main_branch(repo_root))
        resolved = resolve_base(repo_root, base)
        if resolved is None:
            raise StartupError(f"base branch not found: {base}")
        return cls(repo_root, resolved)

    def branch(self) -> str | None:
        return current_branch(self.repo_root)

    def commits(self) -> list[Commit]:
        return list_commits(self.repo_root, self.base)

    def diffs(self, commits: Sequence[Commit], context_lines: int) -> list[FileDiff]:
        return compute_diff(self.repo_root, self.base, commits, context_lines)

    def worktrees(self) -> list[Worktree]:
        return mark_current(list_worktrees(self.repo_root), self.repo_root)

    def switch_to(self, path: Path) -> GitSource:
        """Open ``path`` keeping the current base branch name."""
        return GitSource.open(path, self.base)
