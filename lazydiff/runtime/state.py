"""Mutable per-session UI state shared by the session and the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..diff_model import DiffMode, FileDiff
from ..file_tree import TreeNode
from ..git import Commit, Worktree
from ..navigation import NavigationState

HEADER_ROWS = 1
FOOTER_ROWS = 1


class Focus(str, Enum):
    SIDEBAR = "sidebar"
    CONTENT = "content"


class PopupKind(str, Enum):
    COMMITS = "commits"
    WORKTREE_SWITCHER = "worktree_switcher"
    WORKTREE_LIST = "worktree_list"
    HELP = "help"


@dataclass
class PopupState:
    kind: PopupKind
    selected: int = 0
    query: str = ""


@dataclass
class AppState:
    repo_root: Path
    base_branch: str
    branch: str | None = None
    source_files: list[FileDiff] = field(default_factory=list)
    files: list[FileDiff] = field(default_factory=list)
    tree_nodes: list[TreeNode] = field(default_factory=list)
    tree_rows: list[TreeNode] = field(default_factory=list)
    display_names: dict[str, str] = field(default_factory=dict)
    nav: NavigationState = field(default_factory=NavigationState)
    collapsed_files: set[str] = field(default_factory=set)
    commits: list[Commit] = field(default_factory=list)
    worktrees: list[Worktree] = field(default_factory=list)
    mode: DiffMode = DiffMode.SIDE_BY_SIDE
    show_hidden: bool = False
    context_lines: int = 3
    sidebar_width: int = 32
    focus: Focus = Focus.SIDEBAR
    popup: PopupState | None = None
    count_buffer: str = ""
    error_message: str = ""
    width: int = 80
    height: int = 24
    dirty: bool = True

    @property
    def body_height(self) -> int:
        return max(1, self.height - HEADER_ROWS - FOOTER_ROWS)

    @property
    def content_left(self) -> int:
        """Zero-based column where the content pane starts."""
        return min(self.width, self.sidebar_width + 1)

    @property
    def content_width(self) -> int:
        return max(1, self.width - self.content_left)
