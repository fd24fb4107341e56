"""UI theme definitions and selection helpers.

Themes color the chrome and diff backgrounds. Syntax colors come from the
Pygments style, which is a separate setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    header: str
    header_branch: str
    footer: str
    footer_key: str
    dim: str
    tree_dir: str
    tree_file: str
    tree_hidden: str
    tree_cursor: str
    tree_cursor_unfocused: str
    stat_added: str
    stat_removed: str
    file_header: str
    hunk_header: str
    line_number: str
    added_bg: str
    removed_bg: str
    added_marker: str
    removed_marker: str
    blank_fill: str
    error: str
    popup_border: str
    popup_title: str
    popup_selected: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    header="\033[1;38;5;252m",
    header_branch="\033[1;38;5;81m",
    footer="\033[2;38;5;250m",
    footer_key="\033[38;5;229m",
    dim="\033[2m",
    tree_dir="\033[1;34m",
    tree_file="\033[38;5;252m",
    tree_hidden="\033[2;38;5;244m",
    tree_cursor="\033[7m",
    tree_cursor_unfocused="\033[48;5;238m",
    stat_added="\033[38;5;42m",
    stat_removed="\033[38;5;203m",
    file_header="\033[1;38;5;81;48;5;236m",
    hunk_header="\033[38;5;110m",
    line_number="\033[38;5;242m",
    added_bg="48;2;36;74;52",
    removed_bg="48;2;92;43;49",
    added_marker="\033[38;5;42m",
    removed_marker="\033[38;5;203m",
    blank_fill="\033[48;5;235m",
    error="\033[1;38;5;203m",
    popup_border="\033[38;5;45m",
    popup_title="\033[1;38;5;45m",
    popup_selected="\033[7m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    header="\033[1;38;5;153m",
    header_branch="\033[1;38;5;45m",
    footer="\033[2;38;5;110m",
    footer_key="\033[38;5;153m",
    dim="\033[2;38;5;110m",
    tree_dir="\033[1;38;5;45m",
    tree_file="\033[38;5;252m",
    tree_hidden="\033[2;38;5;67m",
    tree_cursor="\033[7m",
    tree_cursor_unfocused="\033[48;5;24m",
    stat_added="\033[38;5;84m",
    stat_removed="\033[38;5;210m",
    file_header="\033[1;38;5;45;48;5;17m",
    hunk_header="\033[38;5;73m",
    line_number="\033[38;5;67m",
    added_bg="48;2;22;66;62",
    removed_bg="48;2;84;38;58",
    added_marker="\033[38;5;84m",
    removed_marker="\033[38;5;210m",
    blank_fill="\033[48;5;234m",
    error="\033[1;38;5;210m",
    popup_border="\033[38;5;39m",
    popup_title="\033[1;38;5;39m",
    popup_selected="\033[7m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    header="",
    header_branch="",
    footer="",
    footer_key="",
    dim="",
    tree_dir="",
    tree_file="",
    tree_hidden="",
    tree_cursor="\033[7m",
    tree_cursor_unfocused="",
    stat_added="",
    stat_removed="",
    file_header="\033[1m",
    hunk_header="",
    line_number="",
    added_bg="",
    removed_bg="",
    added_marker="",
    removed_marker="",
    blank_fill="",
    error="\033[1m",
    popup_border="",
    popup_title="\033[1m",
    popup_selected="\033[7m",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
    PLAIN_THEME.name: PLAIN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]
