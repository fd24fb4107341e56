"""Tree cursor, tree scroll and content scroll as pure state transitions.

Every function returns a new ``NavigationState``; nothing here touches the
terminal or the diff source. Callers pass the current totals and viewport
heights so each transition can restore its invariants:

* ``0 <= cursor < tree_len`` (``0`` for an empty tree)
* ``scroll <= cursor <= scroll + height - 1``
* ``0 <= content_scroll <= max_scroll``
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from .diff_model import FileDiff
from .file_tree import TreeNode, build_file_tree, flatten_tree, index_of_path, toggle_folder


@dataclass(frozen=True)
class NavigationState:
    cursor: int = 0
    scroll: int = 0
    content_scroll: int = 0
    expanded_folders: dict[str, bool] = field(default_factory=dict)


def clamp_cursor(state: NavigationState, total: int) -> NavigationState:
    if total <= 0:
        return replace(state, cursor=0, scroll=0)
    return replace(state, cursor=max(0, min(state.cursor, total - 1)))


def ensure_cursor_visible(state: NavigationState, total: int, height: int) -> NavigationState:
    """Adjust ``scroll`` so the cursor is on screen; the cursor never moves."""
    state = clamp_cursor(state, total)
    height = max(1, height)
    scroll = state.scroll
    if state.cursor < scroll:
        scroll = state.cursor
    elif state.cursor >= scroll + height:
        scroll = state.cursor - height + 1
    scroll = max(0, min(scroll, max(0, total - height)))
    return replace(state, scroll=scroll)


def set_cursor(state: NavigationState, index: int, total: int, height: int) -> NavigationState:
    return ensure_cursor_visible(replace(state, cursor=index), total, height)


def move_cursor(state: NavigationState, delta: int, total: int, height: int) -> NavigationState:
    return set_cursor(state, state.cursor + delta, total, height)


def scroll_tree(state: NavigationState, delta: int, total: int, height: int) -> NavigationState:
    """Scroll the tree window and drag the cursor along if needed."""
    height = max(1, height)
    scroll = max(0, min(state.scroll + delta, max(0, total - height)))
    cursor = min(max(state.cursor, scroll), scroll + height - 1)
    return clamp_cursor(replace(state, scroll=scroll, cursor=cursor), total)


def clamp_content(state: NavigationState, max_scroll: int) -> NavigationState:
    content_scroll = max(0, min(state.content_scroll, max(0, max_scroll)))
    if content_scroll == state.content_scroll:
        return state
    return replace(state, content_scroll=content_scroll)


def scroll_content(state: NavigationState, delta: int, max_scroll: int) -> NavigationState:
    return clamp_content(replace(state, content_scroll=state.content_scroll + delta), max_scroll)


def jump_to_file(state: NavigationState, offset: int, max_scroll: int) -> NavigationState:
    """Put a file's header row (``offset``) at the top of the content pane."""
    return clamp_content(replace(state, content_scroll=offset), max_scroll)


def relocate_cursor(
    state: NavigationState,
    nodes: Sequence[TreeNode],
    path: str | None,
    height: int,
) -> NavigationState:
    """Re-derive the cursor from ``path`` after the flattened tree was rebuilt.

    Falls back to clamping the previous index when ``path`` is gone.
    """
    index = index_of_path(nodes, path) if path is not None else None
    if index is not None:
        state = replace(state, cursor=index)
    return ensure_cursor_visible(state, len(nodes), height)


def toggle_folder_state(state: NavigationState, path: str) -> NavigationState:
    return replace(state, expanded_folders=toggle_folder(state.expanded_folders, path))


def toggle_folder_at_cursor(
    state: NavigationState,
    files: Sequence[FileDiff],
    height: int,
) -> tuple[NavigationState, list[TreeNode]]:
    """Toggle the folder under the cursor and return the state with the rebuilt rows.

    A cursor on a file (or an empty tree) leaves the state unchanged.
    """
    rows = flatten_tree(build_file_tree(files, state.expanded_folders))
    if not 0 <= state.cursor < len(rows) or not rows[state.cursor].is_folder:
        return state, rows
    path = rows[state.cursor].path
    state = toggle_folder_state(state, path)
    rows = flatten_tree(build_file_tree(files, state.expanded_folders))
    return relocate_cursor(state, rows, path, height), rows


def cursor_path(state: NavigationState, nodes: Sequence[TreeNode]) -> str | None:
    if 0 <= state.cursor < len(nodes):
        return nodes[state.cursor].path
    return None
