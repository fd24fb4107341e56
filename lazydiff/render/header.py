"""Top status line: branch, base, commit selection, totals, current file."""

from __future__ import annotations

from ..ansi import fit_width, styled
from ..diff_model import compute_stats
from ..git import selection_summary
from ..runtime.state import AppState
from ..ui_theme import UITheme
from ..virtual_lines import file_at


def current_file_label(state: AppState) -> str:
    located = file_at(state.files, state.mode, state.nav.content_scroll)
    if located is None:
        return ""
    path = state.files[located[0]].path
    return state.display_names.get(path, path)


def render_header(state: AppState, theme: UITheme) -> str:
    added, removed = compute_stats(state.files)
    branch = state.branch or "(detached)"
    parts = [
        styled(f" {branch}", theme.header_branch),
        styled(f" → {state.base_branch}", theme.header),
        styled(f"  {selection_summary(state.commits)}", theme.dim),
        "  " + styled(f"+{added}", theme.stat_added) + " " + styled(f"-{removed}", theme.stat_removed),
        styled(f"  {len(state.files)} files", theme.dim),
    ]
    label = current_file_label(state)
    if label:
        parts.append(styled(f"  {label}", theme.header))
    return fit_width("".join(parts), state.width)
