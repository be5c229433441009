"""
Custom exception types used across ncaa-checkver.

The CLI is the only place these are turned into an exit status, so the
lower layers raise and never exit on their own.
"""

from __future__ import annotations

from typing import List, Optional


class CheckverError(Exception):
    """Base class for all ncaa-checkver specific errors."""


class GitError(CheckverError):
    """Raised when a git command fails or cannot be started."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.command = list(command or [])
        self.output = output


class RepositoryUnreadableError(CheckverError):
    """Raised when the site repo directory cannot be listed."""

    def __init__(self, path: str) -> None:
        super().__init__(f"there was a problem reading the site repo directory @ {path}")
        self.path = path


class MakefileNotFoundError(CheckverError):
    """Raised when the site repo has no entry named like the makefile."""

    def __init__(self, path: str) -> None:
        super().__init__(f"could not locate makefile @ '{path}'")
        self.path = path


class MakefileUnreadableError(CheckverError):
    """Raised when the located makefile cannot be opened for reading."""

    def __init__(self, path: str) -> None:
        super().__init__(f"could not read makefile @ '{path}'")
        self.path = path
