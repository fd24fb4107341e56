"""Parse ``git diff`` unified output into ``FileDiff`` records.

Only the structure is recovered here: headers, hunks, per-line kinds and line
numbers. Full file contents are attached later by the git provider.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .types import DiffLine, FileDiff, Hunk, LineKind

logger = logging.getLogger(__name__)

_QUOTED_PATH = r'"(?:[^"\\]|\\.)*"'
_FILE_HEADER_RE = re.compile(rf"^diff --git ({_QUOTED_PATH}|a/.+) ({_QUOTED_PATH}|b/.+)$")
_C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, "\"": 34, "\\": 92}
_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

_SKIPPED_HEADER_PREFIXES = (
    "index ",
    "new file",
    "deleted file",
    "old mode",
    "new mode",
    "similarity",
    "dissimilarity",
    "copy from",
    "copy to",
)


@dataclass
class _HunkBuilder:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    header: str
    lines: list[DiffLine] = field(default_factory=list)
    next_old: int = 0
    next_new: int = 0

    def __post_init__(self) -> None:
        self.next_old = self.old_start
        self.next_new = self.new_start

    def add(self, kind: LineKind, text: str) -> None:
        if kind is LineKind.ADDED:
            self.lines.append(DiffLine(kind, text, new_line_number=self.next_new))
            self.next_new += 1
        elif kind is LineKind.REMOVED:
            self.lines.append(DiffLine(kind, text, old_line_number=self.next_old))
            self.next_old += 1
        else:
            self.lines.append(DiffLine(kind, text, self.next_old, self.next_new))
            self.next_old += 1
            self.next_new += 1

    def expects_more(self) -> bool:
        return (
            self.next_old < self.old_start + self.old_count
            or self.next_new < self.new_start + self.new_count
        )

    def build(self) -> Hunk:
        return Hunk(
            old_start=self.old_start,
            old_count=self.old_count,
            new_start=self.new_start,
            new_count=self.new_count,
            header=self.header,
            lines=tuple(self.lines),
        )


@dataclass
class _FileBuilder:
    path: str
    old_path: str
    is_binary: bool = False
    added: int = 0
    removed: int = 0
    hunks: list[Hunk] = field(default_factory=list)
    current: _HunkBuilder | None = None

    def close_hunk(self) -> None:
        if self.current is not None:
            self.hunks.append(self.current.build())
            self.current = None

    def build(self) -> FileDiff:
        self.close_hunk()
        if self.is_binary:
            return FileDiff(path=self.path, old_path=self.old_path, is_binary=True)
        return FileDiff(
            path=self.path,
            old_path=self.old_path,
            added=self.added,
            removed=self.removed,
            hunks=tuple(sorted(self.hunks, key=lambda hunk: hunk.old_start)),
        )


def unquote_path(value: str) -> str:
    """Undo git's C-style quoting of a path (``core.quotePath``).

    Unquoted values are returned unchanged. Octal escapes are raw bytes and
    are decoded together as UTF-8.
    """
    if len(value) < 2 or not (value.startswith('"') and value.endswith('"')):
        return value
    body = value[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 == len(body):
            out += char.encode("utf-8")
            i += 1
            continue
        escaped = body[i + 1]
        octal = body[i + 1:i + 4]
        if len(octal) == 3 and all(digit in "01234567" for digit in octal):
            out.append(int(octal, 8) & 0xFF)
            i += 4
        elif escaped in _C_ESCAPES:
            out.append(_C_ESCAPES[escaped])
            i += 2
        else:
            out += escaped.encode("utf-8")
            i += 2
    return out.decode("utf-8", errors="replace")


def _header_path(token: str, prefix: str) -> str:
    path = unquote_path(token)
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def _strip_side_prefix(raw: str, prefix: str) -> str | None:
    """Return the path from a ``---``/``+++`` line, or ``None`` for /dev/null."""
    value = raw[4:].rstrip("\t")
    if value == "/dev/null":
        return None
    return _header_path(value, prefix)


def parse_unified_diff(diff_text: str) -> list[FileDiff]:
    """Parse multi-file ``git diff`` output.

    Line numbers are assigned by walking each hunk from its recorded start.
    ``\\ No newline at end of file`` markers are dropped.
    """
    files: list[FileDiff] = []
    current: _FileBuilder | None = None

    for raw_line in diff_text.split("\n"):
        header = _FILE_HEADER_RE.match(raw_line)
        if header:
            if current is not None:
                files.append(current.build())
            current = _FileBuilder(
                path=_header_path(header.group(2), "b/"),
                old_path=_header_path(header.group(1), "a/"),
            )
            continue

        if current is None:
            continue

        hunk_match = _HUNK_RE.match(raw_line)
        if hunk_match:
            current.close_hunk()
            current.current = _HunkBuilder(
                old_start=int(hunk_match.group(1)),
                old_count=int(hunk_match.group(2) or "1"),
                new_start=int(hunk_match.group(3)),
                new_count=int(hunk_match.group(4) or "1"),
                header=raw_line.strip(),
            )
            continue

        hunk = current.current
        if hunk is None:
            if raw_line.startswith("Binary files") or raw_line.startswith("GIT binary patch"):
                current.is_binary = True
            elif raw_line.startswith("rename from "):
                current.old_path = unquote_path(raw_line[len("rename from "):])
            elif raw_line.startswith("rename to "):
                current.path = unquote_path(raw_line[len("rename to "):])
            elif raw_line.startswith("--- "):
                old_path = _strip_side_prefix(raw_line, "a/")
                if old_path is not None:
                    current.old_path = old_path
            elif raw_line.startswith("+++ "):
                new_path = _strip_side_prefix(raw_line, "b/")
                if new_path is not None:
                    current.path = new_path
            elif not raw_line.startswith(_SKIPPED_HEADER_PREFIXES) and raw_line:
                logger.debug("ignoring diff header line for %s: %r", current.path, raw_line)
            continue

        if not raw_line:
            # Some producers drop the leading space on empty context lines.
            if hunk.expects_more():
                hunk.add(LineKind.CONTEXT, "")
            continue

        marker = raw_line[0]
        if marker == "+":
            hunk.add(LineKind.ADDED, raw_line[1:])
            current.added += 1
        elif marker == "-":
            hunk.add(LineKind.REMOVED, raw_line[1:])
            current.removed += 1
        elif marker == " ":
            hunk.add(LineKind.CONTEXT, raw_line[1:])
        elif marker == "\\":
            continue
        else:
            # Line outside any hunk body: the hunk ended early.
            current.close_hunk()

    if current is not None:
        files.append(current.build())
    return files
