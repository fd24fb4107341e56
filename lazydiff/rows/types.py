"""Display-row datatypes produced by the row aligner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..diff_model import LineKind


class RowKind(str, Enum):
    FILE_HEADER = "file_header"
    HUNK_HEADER = "hunk_header"
    UNIFIED = "unified"
    SPLIT = "split"


@dataclass(frozen=True)
class Cell:
    """One column of text plus the tokenizer address used to style it."""

    kind: LineKind
    text: str
    line_number: int | None
    cache_key: str
    line_index: int


@dataclass(frozen=True)
class Row:
    """One renderable row.

    Unified rows use ``cell`` plus both line numbers; split rows use ``left``
    and ``right`` where ``None`` means a blank column.
    """

    kind: RowKind
    file_index: int
    header: str = ""
    cell: Cell | None = None
    old_line_number: int | None = None
    new_line_number: int | None = None
    left: Cell | None = None
    right: Cell | None = None
