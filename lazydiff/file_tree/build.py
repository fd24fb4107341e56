"""Build the sorted folder/file node list from visible diffs."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..diff_model import FileDiff, is_hidden_path
from .types import TreeNode


def tree_sort_key(path: str) -> tuple[str, ...]:
    """Sort by path components so a folder's descendants stay contiguous."""
    return tuple(path.split("/"))


def build_file_tree(files: Sequence[FileDiff], expanded_folders: Mapping[str, bool]) -> list[TreeNode]:
    """Return folder and file nodes for ``files`` sorted by path.

    Folder stats are summed over every file beneath them. Folders missing from
    ``expanded_folders`` default to expanded.
    """
    folder_stats: dict[str, list[int]] = {}
    nodes: list[TreeNode] = []
    for index, item in enumerate(files):
        parts = item.path.split("/")
        for depth in range(1, len(parts)):
            stats = folder_stats.setdefault("/".join(parts[:depth]), [0, 0])
            stats[0] += item.added
            stats[1] += item.removed
        nodes.append(
            TreeNode(
                name=parts[-1],
                path=item.path,
                is_folder=False,
                depth=len(parts) - 1,
                added=item.added,
                removed=item.removed,
                file_ref=index,
                expanded=False,
                is_hidden=is_hidden_path(item.path),
            )
        )

    for path, (added, removed) in folder_stats.items():
        nodes.append(
            TreeNode(
                name=path.rsplit("/", 1)[-1],
                path=path,
                is_folder=True,
                depth=path.count("/"),
                added=added,
                removed=removed,
                expanded=expanded_folders.get(path, True),
                is_hidden=is_hidden_path(path),
            )
        )

    nodes.sort(key=lambda node: tree_sort_key(node.path))
    return nodes


def toggle_folder(expanded_folders: Mapping[str, bool], path: str) -> dict[str, bool]:
    """Return a copy of ``expanded_folders`` with ``path`` flipped."""
    updated = dict(expanded_folders)
    updated[path] = not updated.get(path, True)
    return updated
