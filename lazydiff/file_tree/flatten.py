"""Flatten the node list into the rows the sidebar shows."""

from __future__ import annotations

from collections.abc import Sequence

from .types import TreeNode


def flatten_tree(nodes: Sequence[TreeNode]) -> list[TreeNode]:
    """Drop descendants of collapsed folders in one pass.

    ``nodes`` must be in tree order. A collapsed folder itself is kept.
    """
    visible: list[TreeNode] = []
    collapsed_prefixes: list[str] = []
    for node in nodes:
        while collapsed_prefixes and not node.path.startswith(collapsed_prefixes[-1]):
            collapsed_prefixes.pop()
        if collapsed_prefixes:
            continue
        visible.append(node)
        if node.is_folder and not node.expanded:
            collapsed_prefixes.append(node.path + "/")
    return visible


def index_of_path(nodes: Sequence[TreeNode], path: str) -> int | None:
    for index, node in enumerate(nodes):
        if node.path == path:
            return index
    return None


def index_of_file_ref(nodes: Sequence[TreeNode], file_ref: int) -> int | None:
    for index, node in enumerate(nodes):
        if node.file_ref == file_ref:
            return index
    return None
