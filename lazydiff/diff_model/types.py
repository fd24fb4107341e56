"""Passive diff datatypes consumed by the aligner, indices, and renderers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class LineKind(str, Enum):
    """Role of one line inside a hunk."""

    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"


class DiffMode(str, Enum):
    """Layout used for the diff content pane."""

    UNIFIED = "unified"
    SIDE_BY_SIDE = "side_by_side"
    FULL_FILE = "full_file"

    def next(self) -> DiffMode:
        """Return the mode that follows this one in the ``u`` toggle cycle."""
        order = (DiffMode.SIDE_BY_SIDE, DiffMode.UNIFIED, DiffMode.FULL_FILE)
        return order[(order.index(self) + 1) % len(order)]

    @property
    def label(self) -> str:
        return {
            DiffMode.UNIFIED: "unified",
            DiffMode.SIDE_BY_SIDE: "split",
            DiffMode.FULL_FILE: "full",
        }[self]


@dataclass(frozen=True)
class DiffLine:
    """One line of a hunk with its prefix stripped.

    ``old_line_number`` is set for context and removed lines,
    ``new_line_number`` for context and added lines.
    """

    kind: LineKind
    text: str
    old_line_number: int | None = None
    new_line_number: int | None = None


@dataclass(frozen=True)
class Hunk:
    """A contiguous change region anchored at 1-based old/new line ranges."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    header: str = ""
    lines: tuple[DiffLine, ...] = ()

    @property
    def display_header(self) -> str:
        if self.header:
            return self.header
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"

    @property
    def old_first_index(self) -> int:
        """Zero-based index of the first old-side line this hunk covers.

        An empty old range (pure insertion) is anchored *after* ``old_start``.
        """
        if self.old_count == 0:
            return max(0, self.old_start)
        return max(0, self.old_start - 1)

    @property
    def new_first_index(self) -> int:
        """Zero-based index of the first new-side line this hunk covers."""
        if self.new_count == 0:
            return max(0, self.new_start)
        return max(0, self.new_start - 1)


@dataclass(frozen=True)
class FileDiff:
    """The change set for one file.

    ``collapsed`` is a snapshot of the session's collapse side table; build
    collapsed copies with ``dataclasses.replace`` rather than mutating.
    """

    path: str
    old_path: str = ""
    old_content: tuple[str, ...] | None = None
    new_content: tuple[str, ...] | None = None
    added: int = 0
    removed: int = 0
    hunks: tuple[Hunk, ...] = ()
    collapsed: bool = False
    is_binary: bool = False

    def __post_init__(self) -> None:
        if not self.old_path:
            object.__setattr__(self, "old_path", self.path)

    @property
    def renamed(self) -> bool:
        return self.old_path != self.path

    @property
    def has_full_content(self) -> bool:
        return self.old_content is not None and self.new_content is not None

    @property
    def display_path(self) -> str:
        if self.renamed:
            return f"{self.old_path} → {self.path}"
        return self.path


def compute_stats(files: Iterable[FileDiff]) -> tuple[int, int]:
    """Return total ``(added, removed)`` line counts across ``files``."""
    added = 0
    removed = 0
    for item in files:
        added += item.added
        removed += item.removed
    return added, removed
