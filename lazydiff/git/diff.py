"""Run ``git diff`` for a commit selection and attach full file contents."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from ..diff_model import FileDiff, parse_unified_diff
from .commits import Commit
from .runner import git_bytes, git_output
from .worktree import resolve_base

logger = logging.getLogger(__name__)

CONTEXT_LINE_CHOICES = (3, 1, 0)

# Content beyond this size is not loaded; full-file mode falls back to hunks.
MAX_CONTENT_BYTES = 2 * 1024 * 1024


def next_context_lines(current: int) -> int:
    """Cycle 3 -> 1 -> 0 -> 3."""
    try:
        index = CONTEXT_LINE_CHOICES.index(current)
    except ValueError:
        return CONTEXT_LINE_CHOICES[0]
    return CONTEXT_LINE_CHOICES[(index + 1) % len(CONTEXT_LINE_CHOICES)]


def diff_revisions(base: str, commits: Sequence[Commit]) -> tuple[list[str], str, bool] | None:
    """Pick ``git diff`` revision args for the selection.

    Returns ``(rev_args, old_rev, new_is_worktree)`` or ``None`` when nothing
    is selected.
    """
    uncommitted = any(commit.selected and commit.is_uncommitted for commit in commits)
    committed = any(commit.selected and not commit.is_uncommitted for commit in commits)
    if uncommitted and committed:
        return [base], base, True
    if uncommitted:
        return ["HEAD"], "HEAD", True
    if committed:
        return [f"{base}..HEAD"], base, False
    return None


def decode_content(data: bytes | None) -> tuple[str, ...] | None:
    """Split file bytes into lines, or ``None`` for binary/undecodable data."""
    if data is None or len(data) > MAX_CONTENT_BYTES or b"\0" in data:
        return None
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if not text:
        return ()
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return tuple(lines)


def _is_creation(item: FileDiff) -> bool:
    return len(item.hunks) == 1 and item.hunks[0].old_start == 0 and item.hunks[0].old_count == 0


def _is_deletion(item: FileDiff) -> bool:
    return len(item.hunks) == 1 and item.hunks[0].new_start == 0 and item.hunks[0].new_count == 0


def _read_worktree_file(repo_root: Path, path: str) -> bytes | None:
    target = repo_root / path
    try:
        if target.stat().st_size > MAX_CONTENT_BYTES:
            return None
        return target.read_bytes()
    except OSError:
        return None


def load_contents(
    repo_root: Path,
    item: FileDiff,
    old_rev: str,
    new_is_worktree: bool,
) -> FileDiff:
    if item.is_binary:
        return item
    if _is_creation(item):
        old_content: tuple[str, ...] | None = ()
    else:
        old_content = decode_content(git_bytes(repo_root, ["show", f"{old_rev}:{item.old_path}"]))
    if _is_deletion(item):
        new_content: tuple[str, ...] | None = ()
    elif new_is_worktree:
        new_content = decode_content(_read_worktree_file(repo_root, item.path))
    else:
        new_content = decode_content(git_bytes(repo_root, ["show", f"HEAD:{item.path}"]))
    if old_content is None or new_content is None:
        logger.debug("full content unavailable for %s", item.path)
    return replace(item, old_content=old_content, new_content=new_content)


def compute_diff(
    repo_root: Path,
    base: str,
    commits: Sequence[Commit],
    context_lines: int = 3,
    with_contents: bool = True,
) -> list[FileDiff]:
    """Diff the selected commits (and/or working tree) against ``base``.

    Raises ``GitError`` when git fails.
    """
    revisions = diff_revisions(resolve_base(repo_root, base) or base, commits)
    if revisions is None:
        return []
    rev_args, old_rev, new_is_worktree = revisions
    output = git_output(
        repo_root,
        ["diff", "--no-color", "--no-ext-diff", "-M", f"-U{max(0, context_lines)}", *rev_args],
    )
    files = parse_unified_diff(output)
    logger.debug("git diff %s produced %d files", " ".join(rev_args), len(files))
    if not with_contents:
        return files
    return [load_contents(repo_root, item, old_rev, new_is_worktree) for item in files]
