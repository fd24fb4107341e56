"""Command-line front door for lazydiff.

Parses options, configures logging and launches the interactive viewer.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .errors import StartupError
from .runtime import run_viewer
from .runtime.logs import configure_logging
from .ui_theme import available_theme_names

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazydiff",
        description="Browse the changes of a git branch in the terminal.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Path inside the repository. Defaults to cwd.")
    parser.add_argument("-b", "--base", default=None, help="Base branch to diff against (default: auto-detect).")
    parser.add_argument("--style", default=None, help="Pygments style name for syntax colors.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write a debug log to this file.")
    parser.add_argument("--debug", action="store_true", help="Log at debug level.")
    return parser


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse arguments and run the viewer.

    Startup failures exit with status 1 and a message on stderr.
    """
    args = build_parser().parse_args(argv)
    log_file = args.log_file
    if args.debug and log_file is None:
        from .runtime.config import DEFAULT_LOG_PATH

        log_file = DEFAULT_LOG_PATH
    configure_logging(log_file, debug=args.debug)

    path = Path(args.path) if args.path else (default_path or Path.cwd())
    if not path.exists():
        raise SystemExit(f"lazydiff: path not found: {path}")
    try:
        run_viewer(path, base=args.base, style=args.style, theme_name=args.theme, no_color=args.no_color)
    except StartupError as exc:
        logger.error("startup failed: %s", exc)
        raise SystemExit(f"lazydiff: {exc}") from exc
