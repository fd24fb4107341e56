"""Count-only row arithmetic over the visible file list.

Every query here is answered from hunk metadata and content lengths, so a
frame never needs to materialize rows outside the viewport. Results are not
cached; each call walks the file list once.
"""

from __future__ import annotations

from collections.abc import Sequence

from .diff_model import DiffMode, FileDiff
from .rows import effective_mode, full_file_row_count, paired_row_count


def file_row_count(item: FileDiff, mode: DiffMode) -> int:
    """Number of rows ``iter_file_rows(item, mode)`` yields, header included."""
    if item.collapsed or item.is_binary:
        return 1
    layout = effective_mode(item, mode)
    if layout is DiffMode.FULL_FILE:
        return 1 + full_file_row_count(item)
    if layout is DiffMode.UNIFIED:
        return 1 + sum(1 + len(hunk.lines) for hunk in item.hunks)
    return 1 + sum(1 + paired_row_count(hunk) for hunk in item.hunks)


def total_rows(files: Sequence[FileDiff], mode: DiffMode) -> int:
    return sum(file_row_count(item, mode) for item in files)


def file_offsets(files: Sequence[FileDiff], mode: DiffMode) -> list[int]:
    """Return the global row offset of each file's header row."""
    offsets: list[int] = []
    running = 0
    for item in files:
        offsets.append(running)
        running += file_row_count(item, mode)
    return offsets


def scroll_offset_of(files: Sequence[FileDiff], mode: DiffMode, index: int) -> int:
    """Global row offset of file ``index``; out-of-range indexes clamp."""
    if not files:
        return 0
    index = max(0, min(index, len(files) - 1))
    return sum(file_row_count(item, mode) for item in files[:index])


def file_at(files: Sequence[FileDiff], mode: DiffMode, scroll: int) -> tuple[int, int] | None:
    """Map a global row to ``(file_index, local_offset)``.

    Rows past the end resolve to the last file; ``None`` only for no files.
    """
    if not files:
        return None
    scroll = max(0, scroll)
    running = 0
    for index, item in enumerate(files):
        count = file_row_count(item, mode)
        if scroll < running + count:
            return index, scroll - running
        running += count
    last = len(files) - 1
    return last, scroll - (running - file_row_count(files[last], mode))


def clamp_max_scroll(total: int, height: int) -> int:
    return max(0, total - max(0, height))


def next_file_offset(files: Sequence[FileDiff], mode: DiffMode, scroll: int) -> int | None:
    """Smallest file boundary strictly after ``scroll``, or ``None``."""
    for offset in file_offsets(files, mode):
        if offset > scroll:
            return offset
    return None


def prev_file_offset(files: Sequence[FileDiff], mode: DiffMode, scroll: int) -> int:
    """Largest file boundary strictly before ``scroll``, else 0."""
    best = 0
    for offset in file_offsets(files, mode):
        if offset >= scroll:
            break
        best = offset
    return best
