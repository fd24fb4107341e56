"""Single entry point for running ``git`` subprocesses."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..errors import GitError

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 10.0


def run_git(
    repo_root: Path,
    args: list[str],
    timeout_seconds: float = GIT_TIMEOUT_SECONDS,
) -> subprocess.CompletedProcess[str] | None:
    """Run ``git -C repo_root *args``; return ``None`` if git could not start."""
    try:
        return subprocess.run(
            ["git", "-C", str(repo_root), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git %s failed to run: %s", " ".join(args), exc)
        return None


def git_output(repo_root: Path, args: list[str], timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> str:
    """Return stdout of a git command or raise ``GitError``."""
    proc = run_git(repo_root, args, timeout_seconds)
    if proc is None:
        raise GitError("git could not be executed", args)
    if proc.returncode != 0:
        raise GitError(f"git {args[0]} exited with status {proc.returncode}", args, proc.stderr.strip())
    return proc.stdout


def git_succeeds(repo_root: Path, args: list[str]) -> bool:
    proc = run_git(repo_root, args)
    return proc is not None and proc.returncode == 0


def git_bytes(repo_root: Path, args: list[str], timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> bytes | None:
    """Return raw stdout bytes, or ``None`` on any failure."""
    try:
        proc = subprocess.run(
            ["git", "-C", str(repo_root), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git %s failed to run: %s", " ".join(args), exc)
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout
