"""File tree column."""

from __future__ import annotations

from ..ansi import RESET, display_width, fit_width, styled
from ..file_tree import TreeNode
from ..runtime.state import AppState, Focus
from ..ui_theme import UITheme

MAX_INDENT_DEPTH = 6


def format_tree_node(node: TreeNode, width: int, theme: UITheme) -> str:
    """Render one node as ``indent icon name ... +a -r`` clipped to ``width``."""
    indent = "  " * min(node.depth, MAX_INDENT_DEPTH)
    if node.is_folder:
        icon = "▼ " if node.expanded else "▶ "
        name = styled(node.name + "/", theme.tree_hidden if node.is_hidden else theme.tree_dir)
    else:
        icon = "  "
        name = styled(node.name, theme.tree_hidden if node.is_hidden else theme.tree_file)
    stats = ""
    if node.added or node.removed:
        stats = " " + styled(f"+{node.added}", theme.stat_added) + " " + styled(f"-{node.removed}", theme.stat_removed)
    left = f"{indent}{icon}{name}"
    room = width - display_width(stats)
    if room <= display_width(indent) + 4:
        return fit_width(left, width)
    return fit_width(left, room) + stats


def render_sidebar(state: AppState, theme: UITheme) -> list[str]:
    width = state.sidebar_width
    rows: list[str] = []
    nav = state.nav
    for offset in range(state.body_height):
        index = nav.scroll + offset
        if index >= len(state.tree_rows):
            rows.append(" " * width)
            continue
        text = format_tree_node(state.tree_rows[index], width, theme)
        if index == nav.cursor:
            cursor_style = theme.tree_cursor if state.focus is Focus.SIDEBAR else theme.tree_cursor_unfocused
            if cursor_style:
                text = cursor_style + text.replace(RESET, RESET + cursor_style) + RESET
        rows.append(text)
    return rows
