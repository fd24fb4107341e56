"""Persistent JSON config helpers.

Stores viewer preferences (hidden files, context lines, layout mode, theme,
Pygments style, sidebar width, base branch). Malformed or missing config
falls back to defaults; write failures are logged and ignored.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

from ..diff_model import DiffMode
from ..git import CONTEXT_LINE_CHOICES

logger = logging.getLogger(__name__)

APP_NAME = "lazydiff"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / "lazydiff.log"

MIN_SIDEBAR_WIDTH = 16
MAX_SIDEBAR_WIDTH = 80
DEFAULT_SIDEBAR_WIDTH = 32


@dataclass
class ViewerConfig:
    show_hidden: bool = False
    context_lines: int = 3
    diff_mode: DiffMode = DiffMode.SIDE_BY_SIDE
    theme: str | None = None
    style: str = "monokai"
    sidebar_width: int = DEFAULT_SIDEBAR_WIDTH
    base_branch: str | None = None

    def to_json(self) -> dict[str, object]:
        data = asdict(self)
        data["diff_mode"] = self.diff_mode.value
        return data


def load_config() -> dict[str, object]:
    """Load the persisted JSON object, or ``{}`` when missing or malformed."""
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def clamp_sidebar_width(width: int) -> int:
    return max(MIN_SIDEBAR_WIDTH, min(MAX_SIDEBAR_WIDTH, width))


def load_viewer_config() -> ViewerConfig:
    """Build a ``ViewerConfig`` from disk, validating each key independently."""
    data = load_config()
    config = ViewerConfig()

    show_hidden = data.get("show_hidden")
    if isinstance(show_hidden, bool):
        config.show_hidden = show_hidden

    context_lines = data.get("context_lines")
    if not isinstance(context_lines, bool) and context_lines in CONTEXT_LINE_CHOICES:
        config.context_lines = int(context_lines)

    mode = data.get("diff_mode")
    if isinstance(mode, str):
        try:
            config.diff_mode = DiffMode(mode)
        except ValueError:
            logger.debug("unknown diff_mode %r in config", mode)

    config.theme = _optional_str(data.get("theme"))
    config.style = _optional_str(data.get("style")) or config.style

    width = data.get("sidebar_width")
    if isinstance(width, int) and not isinstance(width, bool):
        config.sidebar_width = clamp_sidebar_width(width)

    config.base_branch = _optional_str(data.get("base_branch"))
    return config


def save_viewer_config(config: ViewerConfig) -> None:
    """Merge ``config`` into the stored JSON, keeping keys we do not own."""
    data = load_config()
    data.update(config.to_json())
    save_config(data)
