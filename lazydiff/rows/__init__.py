"""Row aligner: ``FileDiff`` -> display rows for each layout mode."""

from __future__ import annotations

from .align import (
    effective_mode,
    file_rows,
    full_cache_keys,
    full_file_row_count,
    iter_file_rows,
    pair_hunk_lines,
    paired_row_count,
)
from .types import Cell, Row, RowKind

__all__ = [
    "Cell",
    "Row",
    "RowKind",
    "effective_mode",
    "file_rows",
    "full_cache_keys",
    "full_file_row_count",
    "iter_file_rows",
    "pair_hunk_lines",
    "paired_row_count",
]
