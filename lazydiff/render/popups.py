"""Modal popups drawn over the body: commits, worktrees and help.

Rendering here is presentation-only; selection and filtering live in the
session.
"""

from __future__ import annotations

from ..ansi import RESET, clip_ansi_line, display_width, fit_width, styled
from ..git import Commit, Worktree
from ..runtime.state import AppState, PopupKind, PopupState
from ..ui_theme import UITheme

HELP_LINES: tuple[tuple[str, str], ...] = (
    ("j/k, ↑/↓", "move cursor or scroll (accepts count, e.g. 5j)"),
    ("g / G / 10G", "top / bottom / row 10"),
    ("ctrl-d / ctrl-u", "half page down / up"),
    ("n / N", "next / previous file"),
    ("tab", "switch focus between tree and diff"),
    ("enter", "open file, or toggle folder"),
    ("space", "collapse file or folder"),
    ("z", "collapse / expand all files"),
    ("h", "show or hide dotfiles and lock files"),
    ("x", "context lines 3 → 1 → 0"),
    ("u", "cycle split → unified → full file"),
    ("c", "choose commits"),
    ("w / W", "switch worktree / list worktrees"),
    ("< / >", "resize sidebar"),
    ("?", "this help"),
    ("q, esc", "quit"),
)


def _commit_line(commit: Commit, theme: UITheme) -> str:
    mark = "[x]" if commit.selected else "[ ]"
    return f"{mark} " + styled(commit.hash, theme.dim) + f" {commit.subject}"


def _worktree_line(worktree: Worktree, theme: UITheme) -> str:
    current = "* " if worktree.is_current else "  "
    return current + styled(worktree.label, theme.header_branch) + f"  {worktree.path}"


def _window(items: list[str], selected: int, rows: int) -> tuple[int, list[str]]:
    start = max(0, min(selected - rows + 1, len(items) - rows)) if selected >= rows else 0
    return start, items[start : start + rows]


def popup_body(state: AppState, popup: PopupState, theme: UITheme, worktrees: list[Worktree]) -> tuple[str, list[str], int | None]:
    """Return ``(title, lines, selected_index)`` for ``popup``."""
    if popup.kind is PopupKind.COMMITS:
        lines = [_commit_line(commit, theme) for commit in state.commits] or ["no commits"]
        return "Commits  space toggle · a all · n none · enter close", lines, popup.selected
    if popup.kind is PopupKind.WORKTREE_SWITCHER:
        lines = [_worktree_line(item, theme) for item in worktrees] or ["no matching worktrees"]
        query = styled(f"> {popup.query}", theme.footer_key)
        return "Switch worktree  type to filter · enter switch · esc close", [query, *lines], (
            popup.selected + 1 if worktrees else None
        )
    if popup.kind is PopupKind.WORKTREE_LIST:
        lines = [_worktree_line(item, theme) for item in state.worktrees] or ["no worktrees"]
        return "Worktrees  enter switch · esc close", lines, popup.selected
    key_width = max(len(key) for key, _ in HELP_LINES)
    lines = [styled(f"{key:<{key_width}}", theme.footer_key) + f"  {text}" for key, text in HELP_LINES]
    return "Keys  any key closes", lines, None


def overlay_popup(body: list[str], state: AppState, theme: UITheme, worktrees: list[Worktree]) -> list[str]:
    """Draw the active popup as a centered box over ``body`` lines."""
    popup = state.popup
    if popup is None or not body:
        return body
    title, lines, selected = popup_body(state, popup, theme, worktrees)
    inner_width = max(20, min(state.width - 4, max(display_width(line) for line in [title, *lines]) + 2))
    inner_rows = max(1, min(len(lines), len(body) - 2))
    start, shown = _window(lines, selected or 0, inner_rows)
    left = max(0, (state.width - inner_width - 2) // 2)
    top = max(0, (len(body) - inner_rows - 2) // 2)

    border = theme.popup_border
    box = [styled("┌", border) + styled(fit_width(f" {title} ", inner_width), theme.popup_title) + styled("┐", border)]
    for offset, line in enumerate(shown):
        text = fit_width(" " + line, inner_width)
        if selected is not None and start + offset == selected:
            text = theme.popup_selected + text.replace(RESET, RESET + theme.popup_selected) + RESET
        box.append(styled("│", border) + text + styled("│", border))
    box.append(styled("└" + "─" * inner_width + "┘", border))

    out = list(body)
    for offset, line in enumerate(box):
        row = top + offset
        if row >= len(out):
            break
        prefix = clip_ansi_line(out[row], left)
        padding = " " * (left - display_width(prefix))
        out[row] = fit_width(prefix + RESET + padding + line, state.width)
    return out
