"""Turn one ``FileDiff`` into display rows for a layout mode.

Rows are produced by generators so callers can slice out just the viewport.
The matching count-only functions live beside the generators and must agree
with them row for row.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from itertools import islice

from ..diff_model import DiffLine, DiffMode, FileDiff, Hunk, LineKind
from .types import Cell, Row, RowKind

logger = logging.getLogger(__name__)

_IndexedLine = tuple[int, DiffLine]


def full_cache_keys(path: str) -> tuple[str, str]:
    """Tokenizer cache keys for the old and new full-content sides of ``path``."""
    return f"{path}::full::old", f"{path}::full::new"


def _flush_block(
    removed: list[_IndexedLine],
    added: list[_IndexedLine],
) -> Iterator[tuple[_IndexedLine | None, _IndexedLine | None]]:
    for i in range(max(len(removed), len(added))):
        left = removed[i] if i < len(removed) else None
        right = added[i] if i < len(added) else None
        yield left, right


def pair_hunk_lines(
    hunk: Hunk,
    start_index: int = 0,
) -> Iterator[tuple[_IndexedLine | None, _IndexedLine | None]]:
    """Yield ``(left, right)`` pairs for side-by-side display.

    Removed and added lines are buffered until the next context line; the
    buffered block becomes ``max(removed, added)`` rows pairing the i-th
    removed line with the i-th added line. Context lines pair with
    themselves. Each entry is ``(line_index, line)`` where ``line_index``
    counts from ``start_index`` in hunk order.
    """
    removed: list[_IndexedLine] = []
    added: list[_IndexedLine] = []
    for offset, line in enumerate(hunk.lines):
        indexed = (start_index + offset, line)
        if line.kind is LineKind.REMOVED:
            removed.append(indexed)
        elif line.kind is LineKind.ADDED:
            added.append(indexed)
        else:
            yield from _flush_block(removed, added)
            removed = []
            added = []
            yield indexed, indexed
    yield from _flush_block(removed, added)


def paired_row_count(hunk: Hunk) -> int:
    """Number of rows ``pair_hunk_lines`` yields for ``hunk``."""
    rows = 0
    removed = 0
    added = 0
    for line in hunk.lines:
        if line.kind is LineKind.REMOVED:
            removed += 1
        elif line.kind is LineKind.ADDED:
            added += 1
        else:
            rows += max(removed, added) + 1
            removed = 0
            added = 0
    return rows + max(removed, added)


def _side_line_counts(hunk: Hunk) -> tuple[int, int]:
    """Return how many old-side and new-side lines ``hunk`` consumes."""
    old = 0
    new = 0
    for line in hunk.lines:
        if line.kind is not LineKind.ADDED:
            old += 1
        if line.kind is not LineKind.REMOVED:
            new += 1
    return old, new


def _file_header(item: FileDiff, file_index: int) -> Row:
    return Row(RowKind.FILE_HEADER, file_index, header=item.display_path)


def _iter_unified(item: FileDiff, file_index: int) -> Iterator[Row]:
    line_index = 0
    for hunk in item.hunks:
        yield Row(RowKind.HUNK_HEADER, file_index, header=hunk.display_header)
        for line in hunk.lines:
            number = line.new_line_number if line.new_line_number is not None else line.old_line_number
            yield Row(
                RowKind.UNIFIED,
                file_index,
                cell=Cell(line.kind, line.text, number, item.path, line_index),
                old_line_number=line.old_line_number,
                new_line_number=line.new_line_number,
            )
            line_index += 1


def _hunk_cell(entry: _IndexedLine | None, cache_key: str, old_side: bool) -> Cell | None:
    if entry is None:
        return None
    line_index, line = entry
    number = line.old_line_number if old_side else line.new_line_number
    return Cell(line.kind, line.text, number, cache_key, line_index)


def _iter_side_by_side(item: FileDiff, file_index: int) -> Iterator[Row]:
    line_index = 0
    for hunk in item.hunks:
        yield Row(RowKind.HUNK_HEADER, file_index, header=hunk.display_header)
        for left, right in pair_hunk_lines(hunk, line_index):
            yield Row(
                RowKind.SPLIT,
                file_index,
                left=_hunk_cell(left, item.path, old_side=True),
                right=_hunk_cell(right, item.path, old_side=False),
            )
        line_index += len(hunk.lines)


class _FullFileWalker:
    """Two-cursor walk over old/new content, anchored by hunk positions."""

    def __init__(self, item: FileDiff, file_index: int) -> None:
        assert item.old_content is not None and item.new_content is not None
        self.item = item
        self.file_index = file_index
        self.old = item.old_content
        self.new = item.new_content
        self.old_key, self.new_key = full_cache_keys(item.path)
        self.old_idx = 0
        self.new_idx = 0
        self.hunk_line_index = 0

    def _content_cell(self, kind: LineKind, old_side: bool) -> Cell:
        lines = self.old if old_side else self.new
        idx = self.old_idx if old_side else self.new_idx
        text = lines[idx] if idx < len(lines) else ""
        key = self.old_key if old_side else self.new_key
        return Cell(kind, text, idx + 1, key, idx)

    def _hunk_line_cell(self, kind: LineKind, old_side: bool, entry: _IndexedLine) -> Cell:
        """Cell for a replayed hunk line.

        The content line is used only when it still matches the diff text;
        otherwise the hunk line is shown and tokenized under the hunk cache key.
        """
        line_index, line = entry
        lines = self.old if old_side else self.new
        idx = self.old_idx if old_side else self.new_idx
        if idx < len(lines) and lines[idx] == line.text:
            key = self.old_key if old_side else self.new_key
            return Cell(kind, line.text, idx + 1, key, idx)
        return Cell(kind, line.text, idx + 1, self.item.path, line_index)

    def fill_to(self, old_target: int, new_target: int) -> Iterator[Row]:
        """Emit context rows until both cursors reach their targets."""
        while self.old_idx < old_target or self.new_idx < new_target:
            left = None
            right = None
            if self.old_idx < old_target:
                left = self._content_cell(LineKind.CONTEXT, True)
                self.old_idx += 1
            if self.new_idx < new_target:
                right = self._content_cell(LineKind.CONTEXT, False)
                self.new_idx += 1
            yield Row(RowKind.SPLIT, self.file_index, left=left, right=right)

    def hunk_targets(self, hunk: Hunk) -> tuple[int, int]:
        old_target = min(hunk.old_first_index, len(self.old))
        new_target = min(hunk.new_first_index, len(self.new))
        if old_target < self.old_idx or new_target < self.new_idx:
            logger.debug(
                "hunk %s in %s starts before already-emitted lines; clamping",
                hunk.display_header,
                self.item.path,
            )
        return max(old_target, self.old_idx), max(new_target, self.new_idx)

    def replay(self, hunk: Hunk) -> Iterator[Row]:
        for left, right in pair_hunk_lines(hunk, self.hunk_line_index):
            if left is not None and left is right:
                old_cell = self._hunk_line_cell(LineKind.CONTEXT, True, left)
                new_cell = self._hunk_line_cell(LineKind.CONTEXT, False, right)
                self.old_idx += 1
                self.new_idx += 1
                yield Row(RowKind.SPLIT, self.file_index, left=old_cell, right=new_cell)
                continue
            old_cell = None
            new_cell = None
            if left is not None:
                old_cell = self._hunk_line_cell(LineKind.REMOVED, True, left)
                self.old_idx += 1
            if right is not None:
                new_cell = self._hunk_line_cell(LineKind.ADDED, False, right)
                self.new_idx += 1
            yield Row(RowKind.SPLIT, self.file_index, left=old_cell, right=new_cell)
        self.hunk_line_index += len(hunk.lines)

    def rows(self) -> Iterator[Row]:
        for hunk in self.item.hunks:
            yield from self.fill_to(*self.hunk_targets(hunk))
            yield from self.replay(hunk)
        yield from self.fill_to(max(len(self.old), self.old_idx), max(len(self.new), self.new_idx))


def full_file_row_count(item: FileDiff) -> int:
    """Row count of the full-file walk, without building rows.

    Mirrors ``_FullFileWalker``: context fill is the larger of the two cursor
    gaps, each hunk contributes its paired row count, and trailing fill covers
    whichever side has more lines left.
    """
    assert item.old_content is not None and item.new_content is not None
    old_len = len(item.old_content)
    new_len = len(item.new_content)
    old_idx = 0
    new_idx = 0
    rows = 0
    for hunk in item.hunks:
        old_target = max(min(hunk.old_first_index, old_len), old_idx)
        new_target = max(min(hunk.new_first_index, new_len), new_idx)
        rows += max(old_target - old_idx, new_target - new_idx)
        old_consumed, new_consumed = _side_line_counts(hunk)
        old_idx = old_target + old_consumed
        new_idx = new_target + new_consumed
        rows += paired_row_count(hunk)
    return rows + max(0, old_len - old_idx, new_len - new_idx)


def effective_mode(item: FileDiff, mode: DiffMode) -> DiffMode:
    """Return the layout actually used for ``item``.

    Full-file mode degrades to side-by-side when either content side is
    missing.
    """
    if mode is DiffMode.FULL_FILE and not item.has_full_content:
        return DiffMode.SIDE_BY_SIDE
    return mode


def iter_file_rows(item: FileDiff, mode: DiffMode, file_index: int = 0) -> Iterator[Row]:
    """Yield every display row of ``item`` in ``mode``."""
    yield _file_header(item, file_index)
    if item.collapsed or item.is_binary:
        return
    layout = effective_mode(item, mode)
    if layout is not mode:
        logger.debug("full content unavailable for %s; using hunk-only layout", item.path)
    if layout is DiffMode.UNIFIED:
        yield from _iter_unified(item, file_index)
    elif layout is DiffMode.SIDE_BY_SIDE:
        yield from _iter_side_by_side(item, file_index)
    else:
        yield from _FullFileWalker(item, file_index).rows()


def file_rows(
    item: FileDiff,
    mode: DiffMode,
    start: int = 0,
    stop: int | None = None,
    file_index: int = 0,
) -> list[Row]:
    """Materialize rows ``[start, stop)`` of ``item`` only."""
    return list(islice(iter_file_rows(item, mode, file_index), max(0, start), stop))
