"""Compose full ANSI frames from session state.

Rendering reads state and never mutates it; the only shared object touched
is the token cache inside ``LineHighlighter``.
"""

from __future__ import annotations

from ..ansi import RESET, styled
from ..highlight import LineHighlighter
from ..runtime.state import AppState
from ..ui_theme import UITheme
from .content import render_content
from .footer import render_footer
from .header import render_header
from .popups import overlay_popup
from .sidebar import render_sidebar


def render_lines(
    state: AppState,
    highlighter: LineHighlighter,
    theme: UITheme,
    worktree_matches: list | None = None,
) -> list[str]:
    """Return one string per terminal row, each exactly ``state.width`` wide."""
    sidebar = render_sidebar(state, theme)
    content = render_content(state, highlighter, theme)
    divider = styled("│", theme.divider)
    body = [left + divider + right for left, right in zip(sidebar, content)]
    body = overlay_popup(body, state, theme, worktree_matches if worktree_matches is not None else state.worktrees)
    return [render_header(state, theme), *body, render_footer(state, theme)][: state.height]


def render_frame(
    state: AppState,
    highlighter: LineHighlighter,
    theme: UITheme,
    worktree_matches: list | None = None,
) -> str:
    lines = render_lines(state, highlighter, theme, worktree_matches)
    return "\033[H" + (RESET + "\r\n").join(lines) + RESET


__all__ = ["render_frame", "render_lines"]
