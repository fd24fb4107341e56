"""Bootstrap: open the repository, build the session, run the loop."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from ..errors import StartupError
from ..git import GitSource
from ..highlight import LineHighlighter
from ..render import render_frame
from ..ui_theme import resolve_theme
from .config import ViewerConfig, load_viewer_config, save_viewer_config
from .loop import run_main_loop
from .session import DataSource, DiffSession
from .state import AppState
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def build_session(
    source: DataSource,
    config: ViewerConfig,
    *,
    style: str | None = None,
    no_color: bool = False,
    width: int = 80,
    height: int = 24,
) -> DiffSession:
    """Create a loaded ``DiffSession`` from a data source and preferences."""
    state = AppState(
        repo_root=source.repo_root,
        base_branch=source.base,
        mode=config.diff_mode,
        show_hidden=config.show_hidden,
        context_lines=config.context_lines,
        sidebar_width=config.sidebar_width,
        width=width,
        height=height,
    )
    highlighter = LineHighlighter(style or config.style, enabled=not no_color)
    session = DiffSession(state, source, highlighter)
    session.load()
    return session


def remember_preferences(session: DiffSession, config: ViewerConfig) -> None:
    state = session.state
    config.show_hidden = state.show_hidden
    config.context_lines = state.context_lines
    config.diff_mode = state.mode
    config.sidebar_width = state.sidebar_width
    save_viewer_config(config)


def run_viewer(
    path: Path,
    base: str | None = None,
    style: str | None = None,
    theme_name: str | None = None,
    no_color: bool = False,
) -> None:
    """Run the interactive viewer for the repository containing ``path``.

    Raises ``StartupError`` when the repository or base branch cannot be
    resolved, or when stdin/stdout are not a terminal.
    """
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise StartupError("lazydiff needs an interactive terminal")

    no_color = no_color or "NO_COLOR" in os.environ
    config = load_viewer_config()
    source = GitSource.open(path, base or config.base_branch)
    logger.info("opened %s against %s", source.repo_root, source.base)

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    columns, rows = terminal.size()
    session = build_session(source, config, style=style, no_color=no_color, width=columns, height=rows)
    if session.state.error_message and not session.state.source_files:
        raise StartupError(session.state.error_message)

    theme = resolve_theme(theme_name or config.theme, no_color=no_color)

    def draw(current: DiffSession) -> str:
        return render_frame(current.state, current.highlighter, theme, current.filtered_worktrees())

    try:
        run_main_loop(session, terminal, stdin_fd, draw)
    finally:
        remember_preferences(session, config)
