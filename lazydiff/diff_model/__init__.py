"""Diff datatypes, unified-diff parsing, and visibility helpers."""

from __future__ import annotations

from .parse import parse_unified_diff
from .types import DiffLine, DiffMode, FileDiff, Hunk, LineKind, compute_stats
from .visibility import (
    HIDDEN_FILE_NAMES,
    apply_collapse_state,
    hidden_count,
    is_hidden_path,
    visible_files,
)

__all__ = [
    "DiffLine",
    "DiffMode",
    "FileDiff",
    "Hunk",
    "LineKind",
    "compute_stats",
    "parse_unified_diff",
    "HIDDEN_FILE_NAMES",
    "apply_collapse_state",
    "hidden_count",
    "is_hidden_path",
    "visible_files",
]
