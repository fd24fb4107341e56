"""Sidebar tree node datatype."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TreeNode:
    """One folder or file row of the sidebar tree.

    ``file_ref`` indexes the visible file list and is set for files only.
    ``expanded`` is meaningful for folders only.
    """

    name: str
    path: str
    is_folder: bool
    depth: int
    added: int = 0
    removed: int = 0
    file_ref: int | None = None
    expanded: bool = True
    is_hidden: bool = False
