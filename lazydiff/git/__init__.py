"""Git data provider: worktrees, commits, diffs and file contents."""

from __future__ import annotations

from .commits import (
    UNCOMMITTED_HASH,
    Commit,
    list_commits,
    parse_log_output,
    selection_summary,
    set_all_selected,
    toggle_commit,
)
from .diff import (
    CONTEXT_LINE_CHOICES,
    compute_diff,
    decode_content,
    diff_revisions,
    next_context_lines,
)
from .source import GitSource
from .worktree import (
    Worktree,
    current_branch,
    find_current_worktree,
    find_repo_root,
    get_main_branch,
    list_worktrees,
    mark_current,
    parse_worktree_output,
    resolve_base,
)

__all__ = [
    "CONTEXT_LINE_CHOICES",
    "UNCOMMITTED_HASH",
    "Commit",
    "GitSource",
    "Worktree",
    "compute_diff",
    "current_branch",
    "decode_content",
    "diff_revisions",
    "find_current_worktree",
    "find_repo_root",
    "get_main_branch",
    "list_commits",
    "list_worktrees",
    "mark_current",
    "next_context_lines",
    "parse_log_output",
    "parse_worktree_output",
    "resolve_base",
    "selection_summary",
    "set_all_selected",
    "toggle_commit",
]
