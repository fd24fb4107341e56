"""Exception types shared across lazydiff layers."""

from __future__ import annotations


class LazydiffError(Exception):
    """Base class for lazydiff failures."""


class GitError(LazydiffError):
    """A git subprocess failed or produced unusable output."""

    def __init__(self, message: str, args: list[str] | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.git_args = list(args or [])
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr.splitlines()[-1]}"
        return message


class StartupError(LazydiffError):
    """Fatal condition detected before the interactive session starts."""
