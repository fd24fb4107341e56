"""Commits between the base branch and HEAD, plus uncommitted changes."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from .runner import git_output, run_git
from .worktree import resolve_base

logger = logging.getLogger(__name__)

UNCOMMITTED_HASH = "-------"
UNCOMMITTED_SUBJECT = "(uncommitted changes)"


@dataclass(frozen=True)
class Commit:
    hash: str
    full_hash: str
    subject: str
    selected: bool = True
    is_uncommitted: bool = False


def has_uncommitted_changes(repo_root: Path) -> bool:
    return bool(git_output(repo_root, ["status", "--porcelain", "--untracked-files=normal"]).strip())


def parse_log_output(output: str) -> list[Commit]:
    """Parse ``git log --format=%H%x00%s`` output."""
    commits: list[Commit] = []
    for line in output.splitlines():
        full_hash, sep, subject = line.partition("\0")
        if not sep or not full_hash:
            continue
        commits.append(Commit(hash=full_hash[:7], full_hash=full_hash, subject=subject))
    return commits


def list_commits(repo_root: Path, base: str) -> list[Commit]:
    """List the virtual uncommitted entry (if any) then ``base..HEAD`` newest first.

    An unknown base yields only the uncommitted entry.
    """
    commits: list[Commit] = []
    if has_uncommitted_changes(repo_root):
        commits.append(Commit(UNCOMMITTED_HASH, "", UNCOMMITTED_SUBJECT, is_uncommitted=True))

    resolved = resolve_base(repo_root, base)
    if resolved is None:
        logger.debug("base %r does not resolve in %s", base, repo_root)
        return commits
    proc = run_git(repo_root, ["log", "--topo-order", "--format=%H%x00%s", f"{resolved}..HEAD"])
    if proc is None or proc.returncode != 0:
        # An unborn HEAD has no log; treat it as no commits.
        return commits
    commits.extend(parse_log_output(proc.stdout))
    return commits


def toggle_commit(commits: Sequence[Commit], index: int) -> list[Commit]:
    out = list(commits)
    if 0 <= index < len(out):
        out[index] = replace(out[index], selected=not out[index].selected)
    return out


def set_all_selected(commits: Sequence[Commit], selected: bool) -> list[Commit]:
    return [replace(commit, selected=selected) for commit in commits]


def selection_summary(commits: Sequence[Commit]) -> str:
    chosen = [commit for commit in commits if commit.selected]
    if not commits:
        return "no commits"
    if len(chosen) == len(commits):
        return f"all {len(commits)} commits"
    if not chosen:
        return "nothing selected"
    return f"{len(chosen)}/{len(commits)} commits"
