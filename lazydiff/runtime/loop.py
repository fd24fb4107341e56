"""Main interactive event loop: read one token, apply it, redraw."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .input import read_key
from .session import DiffSession
from .terminal import TerminalController

logger = logging.getLogger(__name__)

INPUT_POLL_MS = 200


def run_main_loop(
    session: DiffSession,
    terminal: TerminalController,
    stdin_fd: int,
    draw: Callable[[DiffSession], str],
) -> None:
    """Run until a quit key. Each iteration checks size, redraws if dirty, reads input."""
    state = session.state
    with terminal.raw_mode():
        while True:
            columns, rows = terminal.size()
            session.resize(columns, rows)
            if state.dirty:
                terminal.write_frame(draw(session))
                state.dirty = False
            key = read_key(stdin_fd, timeout_ms=INPUT_POLL_MS)
            if key == "":
                continue
            logger.debug("key %r", key)
            if session.handle_key(key):
                break
