"""Per-line syntax tokenizing with Pygments and an owned token cache.

The session owns one ``LineHighlighter`` and passes it to the renderer; it is
cleared whenever diffs are reloaded so a reused path never shows stale tokens.
"""

from __future__ import annotations

import logging
import re

from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_all_styles, get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

Token = tuple[str, str]


def sanitize_terminal_text(text: str) -> str:
    """Escape terminal control bytes so diff text cannot move the cursor."""
    if _CONTROL_RE.search(text) is None:
        return text
    out: list[str] = []
    for ch in text:
        code = ord(ch)
        if ch == "\t":
            out.append(ch)
        elif code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
        else:
            out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    if style in set(get_all_styles()):
        return style
    logger.debug("unknown pygments style %r; using %s", style, DEFAULT_STYLE)
    return DEFAULT_STYLE


def _sgr_for(style_def: dict) -> str:
    codes: list[str] = []
    if style_def.get("bold"):
        codes.append("1")
    if style_def.get("italic"):
        codes.append("3")
    if style_def.get("underline"):
        codes.append("4")
    color = style_def.get("color")
    if color:
        codes.append(f"38;2;{int(color[0:2], 16)};{int(color[2:4], 16)};{int(color[4:6], 16)}")
    return ";".join(codes)


class LineHighlighter:
    """Tokenize single lines into ``(fragment, sgr_params)`` pairs.

    Entries are cached by ``(cache_key, line_index)``. The fragments of a
    result always concatenate to the input text; when a lexer disagrees the
    line comes back as one unstyled fragment.
    """

    def __init__(self, style: str = DEFAULT_STYLE, enabled: bool = True) -> None:
        self.enabled = enabled
        self.style_name = normalize_style(style)
        self._style = get_style_by_name(self.style_name)
        self._sgr_by_token: dict[object, str] = {}
        self._lexers: dict[str, Lexer] = {}
        self._cache: dict[str, dict[int, list[Token]]] = {}

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._cache.values())

    def _lexer_for(self, filename: str) -> Lexer:
        lexer = self._lexers.get(filename)
        if lexer is not None:
            return lexer
        try:
            lexer = get_lexer_for_filename(filename, stripnl=False, ensurenl=False)
        except ClassNotFound:
            lexer = TextLexer(stripnl=False, ensurenl=False)
        self._lexers[filename] = lexer
        return lexer

    def _sgr_for_token(self, token_type: object) -> str:
        sgr = self._sgr_by_token.get(token_type)
        if sgr is None:
            sgr = _sgr_for(self._style.style_for_token(token_type))
            self._sgr_by_token[token_type] = sgr
        return sgr

    def _tokenize(self, filename: str, text: str) -> list[Token]:
        if not self.enabled or not text:
            return [(text, "")]
        fragments: list[Token] = []
        for token_type, value in self._lexer_for(filename).get_tokens(text):
            if not value:
                continue
            sgr = self._sgr_for_token(token_type)
            if fragments and fragments[-1][1] == sgr:
                fragments[-1] = (fragments[-1][0] + value, sgr)
            else:
                fragments.append((value, sgr))
        if "".join(fragment for fragment, _ in fragments) != text:
            logger.debug("lexer output for %s did not match its input; showing plain text", filename)
            return [(text, "")]
        return fragments

    def tokens(self, cache_key: str, filename: str, line_index: int, text: str) -> list[Token]:
        entries = self._cache.setdefault(cache_key, {})
        cached = entries.get(line_index)
        if cached is not None and "".join(fragment for fragment, _ in cached) == text:
            return cached
        fragments = self._tokenize(filename, text)
        entries[line_index] = fragments
        return fragments

    def invalidate(self, cache_key: str) -> None:
        self._cache.pop(cache_key, None)

    def clear(self) -> None:
        self._cache.clear()
