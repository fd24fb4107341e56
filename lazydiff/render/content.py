"""Diff content pane.

Only the rows inside the viewport are pulled from the aligner; each cell is
tokenized through the session's ``LineHighlighter`` and painted with a
per-kind background.
"""

from __future__ import annotations

from ..ansi import RESET, clip_ansi_line, display_width, expand_tabs, fit_width, sgr, styled
from ..diff_model import FileDiff, LineKind, hidden_count
from ..highlight import LineHighlighter, sanitize_terminal_text
from ..rows import Cell, Row, RowKind, file_rows
from ..runtime.state import AppState
from ..ui_theme import UITheme
from ..virtual_lines import file_at

_MARKERS = {LineKind.ADDED: "+", LineKind.REMOVED: "-", LineKind.CONTEXT: " "}


def line_number_width(item: FileDiff) -> int:
    """Digits needed for the largest line number ``item`` can show."""
    largest = 0
    for hunk in item.hunks:
        largest = max(largest, hunk.old_start + hunk.old_count, hunk.new_start + hunk.new_count)
    largest = max(largest, len(item.old_content or ()), len(item.new_content or ()))
    return max(3, len(str(largest)))


def _background(kind: LineKind, theme: UITheme) -> str:
    if kind is LineKind.ADDED:
        return theme.added_bg
    if kind is LineKind.REMOVED:
        return theme.removed_bg
    return ""


def paint_text(
    highlighter: LineHighlighter,
    filename: str,
    cell: Cell,
    width: int,
    theme: UITheme,
) -> str:
    """Tokenize ``cell`` and fit it into ``width`` columns with its background."""
    if width <= 0:
        return ""
    text = cell.text.rstrip("\r")
    bg = _background(cell.kind, theme)
    out: list[str] = []
    col = 0
    for fragment, params in highlighter.tokens(cell.cache_key, filename, cell.line_index, text):
        shown = expand_tabs(sanitize_terminal_text(fragment), col)
        col += display_width(shown)
        combined = ";".join(part for part in (bg, params) if part)
        out.append(sgr(combined) + shown + (RESET if combined else ""))
        if col >= width:
            break
    clipped = clip_ansi_line("".join(out), width)
    pad = width - display_width(clipped)
    if pad <= 0:
        return clipped + (RESET if bg else "")
    if bg:
        return clipped + styled(" " * pad, sgr(bg))
    return clipped + " " * pad


def _gutter(number: int | None, kind: LineKind, digits: int, theme: UITheme) -> str:
    label = f"{number:>{digits}}" if number is not None else " " * digits
    marker = _MARKERS[kind]
    marker_style = ""
    if kind is LineKind.ADDED:
        marker_style = theme.added_marker
    elif kind is LineKind.REMOVED:
        marker_style = theme.removed_marker
    return styled(label, theme.line_number) + " " + styled(marker, marker_style) + " "


def _blank_column(width: int, theme: UITheme) -> str:
    return styled(" " * max(0, width), theme.blank_fill)


def _side_column(
    cell: Cell | None,
    filename: str,
    width: int,
    digits: int,
    highlighter: LineHighlighter,
    theme: UITheme,
) -> str:
    if cell is None:
        return _blank_column(width, theme)
    gutter_width = digits + 3
    if width <= gutter_width:
        return fit_width(_gutter(cell.line_number, cell.kind, digits, theme), width)
    gutter = _gutter(cell.line_number, cell.kind, digits, theme)
    return gutter + paint_text(highlighter, filename, cell, width - gutter_width, theme)


def render_row(
    row: Row,
    item: FileDiff,
    width: int,
    digits: int,
    highlighter: LineHighlighter,
    theme: UITheme,
) -> str:
    if row.kind is RowKind.FILE_HEADER:
        icon = "▶" if item.collapsed else "▼"
        suffix = "  (binary)" if item.is_binary else f"  +{item.added} -{item.removed}"
        return styled(fit_width(f"{icon} {row.header}{suffix}", width), theme.file_header)
    if row.kind is RowKind.HUNK_HEADER:
        return styled(fit_width(row.header, width), theme.hunk_header)
    if row.kind is RowKind.UNIFIED:
        cell = row.cell
        assert cell is not None
        old = f"{row.old_line_number:>{digits}}" if row.old_line_number is not None else " " * digits
        gutter = styled(old, theme.line_number) + " " + _gutter(row.new_line_number, cell.kind, digits, theme)
        text_width = width - (2 * digits + 4)
        if text_width <= 0:
            return fit_width(gutter, width)
        return gutter + paint_text(highlighter, item.path, cell, text_width, theme)

    left_width = (width - 1) // 2
    right_width = width - 1 - left_width
    left = _side_column(row.left, item.old_path, left_width, digits, highlighter, theme)
    right = _side_column(row.right, item.path, right_width, digits, highlighter, theme)
    return left + styled("│", theme.divider) + right


def _empty_message(state: AppState) -> str:
    if state.error_message:
        return state.error_message
    hidden = hidden_count(state.source_files, state.show_hidden)
    if hidden:
        return f"All {hidden} files hidden (press 'h' to show)"
    return "No changes"


def render_content(state: AppState, highlighter: LineHighlighter, theme: UITheme) -> list[str]:
    width = state.content_width
    height = state.body_height
    lines: list[str] = []
    located = file_at(state.files, state.mode, state.nav.content_scroll)
    if located is None:
        message = _empty_message(state)
        style = theme.error if state.error_message else theme.dim
        lines.append(styled(fit_width(f" {message}", width), style))
    else:
        index, local = located
        while len(lines) < height and index < len(state.files):
            item = state.files[index]
            digits = line_number_width(item)
            for row in file_rows(item, state.mode, local, local + height - len(lines), file_index=index):
                lines.append(render_row(row, item, width, digits, highlighter, theme))
            index += 1
            local = 0
        if state.error_message and lines:
            lines[0] = styled(fit_width(f" {state.error_message}", width), theme.error)
    while len(lines) < height:
        lines.append(" " * width)
    return lines
