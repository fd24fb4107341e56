"""Repository discovery, worktree listing and base-branch detection."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .runner import git_output, git_succeeds, run_git

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Worktree:
    path: Path
    branch: str | None = None
    head: str = ""
    is_current: bool = False

    @property
    def label(self) -> str:
        if self.branch:
            return self.branch
        if self.head:
            return f"(detached {self.head[:7]})"
        return "(detached)"


def find_repo_root(path: Path) -> Path | None:
    """Return the top-level directory of the repository containing ``path``."""
    start = path if path.is_dir() else path.parent
    proc = run_git(start, ["rev-parse", "--show-toplevel"])
    if proc is None or proc.returncode != 0:
        return None
    top = proc.stdout.strip()
    return Path(top).resolve() if top else None


def parse_worktree_output(output: str) -> list[Worktree]:
    """Parse ``git worktree list --porcelain`` records."""
    worktrees: list[Worktree] = []
    path: Path | None = None
    branch: str | None = None
    head = ""
    for line in [*output.splitlines(), ""]:
        if not line:
            if path is not None:
                worktrees.append(Worktree(path=path, branch=branch, head=head))
            path, branch, head = None, None, ""
            continue
        key, _, value = line.partition(" ")
        if key == "worktree":
            path = Path(value)
        elif key == "HEAD":
            head = value
        elif key == "branch":
            branch = value.removeprefix("refs/heads/")
    return worktrees


def list_worktrees(repo_root: Path) -> list[Worktree]:
    return parse_worktree_output(git_output(repo_root, ["worktree", "list", "--porcelain"]))


def find_current_worktree(worktrees: Sequence[Worktree], current_path: Path) -> int | None:
    """Index of the worktree with the longest path prefix of ``current_path``."""
    try:
        current = current_path.resolve()
    except OSError:
        return None
    best: tuple[int, int] | None = None
    for index, worktree in enumerate(worktrees):
        try:
            root = worktree.path.resolve()
        except OSError:
            continue
        if current == root or current.is_relative_to(root):
            length = len(os.fspath(root))
            if best is None or length > best[1]:
                best = (index, length)
    return best[0] if best is not None else None


def mark_current(worktrees: Sequence[Worktree], current_path: Path) -> list[Worktree]:
    index = find_current_worktree(worktrees, current_path)
    return [
        Worktree(item.path, item.branch, item.head, is_current=(i == index))
        for i, item in enumerate(worktrees)
    ]


def current_branch(repo_root: Path) -> str | None:
    proc = run_git(repo_root, ["symbolic-ref", "--quiet", "--short", "HEAD"])
    if proc is None or proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def get_main_branch(repo_root: Path) -> str:
    """Guess the branch to diff against.

    Uses the remote's default branch when known, then ``origin/main``,
    ``origin/master``, ``main`` and ``master``; ``main`` if none exist.
    """
    proc = run_git(repo_root, ["symbolic-ref", "--quiet", "--short", "refs/remotes/origin/HEAD"])
    if proc is not None and proc.returncode == 0 and proc.stdout.strip():
        return proc.stdout.strip()
    for ref, name in (
        ("refs/remotes/origin/main", "origin/main"),
        ("refs/remotes/origin/master", "origin/master"),
        ("refs/heads/main", "main"),
        ("refs/heads/master", "master"),
    ):
        if git_succeeds(repo_root, ["show-ref", "--verify", "--quiet", ref]):
            return name
    logger.debug("no main branch found in %s; defaulting to main", repo_root)
    return "main"


def resolve_base(repo_root: Path, base: str) -> str | None:
    """Return ``base`` or ``origin/<base>`` whichever names a commit."""
    for candidate in (base, f"origin/{base}"):
        if git_succeeds(repo_root, ["rev-parse", "--verify", "--quiet", f"{candidate}^{{commit}}"]):
            return candidate
    return None
