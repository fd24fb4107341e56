"""Hidden-file classification and collapse-aware visible snapshots."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import replace

from .types import FileDiff

HIDDEN_FILE_NAMES = frozenset(
    {
        "go.sum",
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        "Cargo.lock",
        "Gemfile.lock",
        "poetry.lock",
        "composer.lock",
        ".pnp.cjs",
        ".pnp.loader.mjs",
    }
)


def is_hidden_path(path: str) -> bool:
    """Return whether ``path`` is a dotfile/dot-folder member or a lock file."""
    parts = path.split("/")
    if any(part.startswith(".") for part in parts):
        return True
    return parts[-1] in HIDDEN_FILE_NAMES


def apply_collapse_state(files: Sequence[FileDiff], collapsed_paths: Collection[str]) -> list[FileDiff]:
    """Return snapshots whose ``collapsed`` flag mirrors ``collapsed_paths``.

    Unchanged entries are returned as-is so identity checks stay cheap.
    """
    out: list[FileDiff] = []
    for item in files:
        collapsed = item.path in collapsed_paths
        out.append(item if item.collapsed == collapsed else replace(item, collapsed=collapsed))
    return out


def visible_files(
    files: Sequence[FileDiff],
    show_hidden: bool,
    collapsed_paths: Collection[str] = (),
) -> list[FileDiff]:
    """Filter hidden files (unless ``show_hidden``) and apply collapse state."""
    shown = list(files) if show_hidden else [item for item in files if not is_hidden_path(item.path)]
    return apply_collapse_state(shown, collapsed_paths)


def hidden_count(files: Sequence[FileDiff], show_hidden: bool) -> int:
    if show_hidden:
        return 0
    return sum(1 for item in files if is_hidden_path(item.path))
