"""Bottom line: key hints and current settings."""

from __future__ import annotations

from ..ansi import fit_width, styled
from ..diff_model import hidden_count
from ..runtime.state import AppState, Focus
from ..ui_theme import UITheme


def render_footer(state: AppState, theme: UITheme) -> str:
    def hint(key: str, label: str) -> str:
        return styled(key, theme.footer_key) + styled(f" {label}", theme.footer)

    focus = "[Sidebar]" if state.focus is Focus.SIDEBAR else "[Content]"
    hidden = hidden_count(state.source_files, state.show_hidden)
    hidden_label = f"hidden({hidden})" if hidden else ("hidden:on" if state.show_hidden else "hidden")
    hints = [
        styled(f" {focus}", theme.header),
        hint("j/k", "move"),
        hint("tab", "focus"),
        hint("space", "toggle"),
        hint("n/N", "file"),
        hint("u", state.mode.label),
        hint("x", f"ctx:{state.context_lines}"),
        hint("h", hidden_label),
        hint("c", "commits"),
        hint("w", "worktrees"),
        hint("?", "help"),
        hint("q", "quit"),
    ]
    return fit_width("  ".join(hints), state.width)
