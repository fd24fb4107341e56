"""Sidebar file tree: build, flatten, and name disambiguation."""

from __future__ import annotations

from .build import build_file_tree, toggle_folder, tree_sort_key
from .display import display_names
from .flatten import flatten_tree, index_of_file_ref, index_of_path
from .types import TreeNode

__all__ = [
    "TreeNode",
    "build_file_tree",
    "display_names",
    "flatten_tree",
    "index_of_file_ref",
    "index_of_path",
    "toggle_folder",
    "tree_sort_key",
]
