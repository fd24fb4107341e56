"""Short display names for files that share a basename."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable


def _unique_suffix(path: str, siblings: list[str]) -> str:
    parts = path.split("/")
    for start in range(len(parts) - 1, -1, -1):
        suffix = "/".join(parts[start:])
        matches = sum(1 for other in siblings if other == suffix or other.endswith("/" + suffix))
        if matches == 1:
            return suffix
    return path


def display_names(paths: Iterable[str]) -> dict[str, str]:
    """Map each path to its basename, or its shortest unique suffix if shared.

    >>> display_names(["src/a/x.py", "src/b/x.py", "y.py"])["src/a/x.py"]
    'a/x.py'
    """
    paths = list(paths)
    by_basename: dict[str, list[str]] = defaultdict(list)
    for path in paths:
        by_basename[path.rsplit("/", 1)[-1]].append(path)

    names: dict[str, str] = {}
    for path in paths:
        basename = path.rsplit("/", 1)[-1]
        siblings = by_basename[basename]
        names[path] = basename if len(siblings) == 1 else _unique_suffix(path, siblings)
    return names
