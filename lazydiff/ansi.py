"""ANSI-aware width measurement, clipping and padding.

Escape sequences never count toward width; tabs expand to the next stop and
wide characters take two columns.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 4
RESET = "\033[0m"


def char_display_width(ch: str, col: int) -> int:
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def expand_tabs(text: str, start_col: int = 0) -> str:
    if "\t" not in text:
        return text
    out: list[str] = []
    col = start_col
    for ch in text:
        width = char_display_width(ch, col)
        out.append(" " * width if ch == "\t" else ch)
        col += width
    return "".join(out)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` columns, keeping escapes."""
    if max_cols <= 0 or not text:
        return ""
    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        width = char_display_width(ch, col)
        if col + width > max_cols:
            break
        out.append(" " * width if ch == "\t" else ch)
        col += width
        i += 1
    return "".join(out)


def fit_width(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and pad the rest with spaces."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def styled(text: str, sgr: str, enabled: bool = True) -> str:
    """Wrap ``text`` in an SGR prefix (full escape) and a reset."""
    if not sgr or not enabled or not text:
        return text
    return f"{sgr}{text}{RESET}"


def sgr(params: str) -> str:
    """Turn bare SGR parameters (``"1;31"``) into an escape sequence."""
    return f"\033[{params}m" if params else ""
