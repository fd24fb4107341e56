"""Interactive runtime: config, terminal, input, session and main loop."""

from __future__ import annotations


def run_viewer(*args, **kwargs):
    """Lazily import the bootstrap to avoid package-import cycles."""
    from .app import run_viewer as _run_viewer

    return _run_viewer(*args, **kwargs)


__all__ = ["run_viewer"]
