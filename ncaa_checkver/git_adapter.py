"""
Git integration for ncaa-checkver.

All git invocations go through a GitRunner so the working directory is
always passed explicitly and tests can substitute a fake runner instead
of touching a real repository.
"""

from __future__ import annotations

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .config import DEFAULT_REMOTE
from .errors import GitError, RepositoryUnreadableError

LOG = logging.getLogger(__name__)


class GitRunner(ABC):
    """
    Abstract interface for running git commands.
    """

    @abstractmethod
    def run(self, args: List[str], cwd: str) -> str:
        """
        Run git with the given arguments inside cwd.

        Returns the combined stdout/stderr of the command. Implementations
        raise GitError, carrying that same output, when git exits non-zero.
        """


class SubprocessGitRunner(GitRunner):
    """Runs the git binary found on PATH."""

    def __init__(self, git: str = "git") -> None:
        self.git = git

    def run(self, args: List[str], cwd: str) -> str:
        cmd = [self.git, *args]
        LOG.debug("Running git command in %s: %s", cwd, " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                check=False,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as exc:
            if not os.path.isdir(cwd):
                raise RepositoryUnreadableError(cwd) from exc
            raise GitError(f"failed to execute git: {exc}", command=cmd) from exc

        if completed.returncode != 0:
            raise GitError(
                f"there was a problem running the git command '{' '.join(args)}'",
                command=cmd,
                output=completed.stdout or "",
            )

        return completed.stdout or ""


def _runner_or_default(runner: Optional[GitRunner]) -> GitRunner:
    if runner is None:
        return SubprocessGitRunner()
    return runner


def remote_ref(branch: str, remote: str = DEFAULT_REMOTE) -> str:
    """
    Qualify branch with the upstream remote, e.g. "origin/master".
    """

    if not remote:
        return branch
    return f"{remote}/{branch}"


def get_current_ref(repo_path: str, runner: Optional[GitRunner] = None) -> str:
    """
    Return the abbreviated name of the ref currently checked out.

    On a detached HEAD git abbreviates to "HEAD", which cannot be checked
    out again later, so the commit id is returned instead.
    """

    runner = _runner_or_default(runner)
    ref = runner.run(["rev-parse", "--abbrev-ref", "HEAD"], repo_path).strip()
    if ref == "HEAD":
        ref = runner.run(["rev-parse", "HEAD"], repo_path).strip()
    return ref


def checkout(ref: str, repo_path: str, runner: Optional[GitRunner] = None) -> None:
    """
    Check out the given ref.
    """

    LOG.info("Checking out %s in %s", ref, repo_path)
    _runner_or_default(runner).run(["checkout", ref], repo_path)


@contextmanager
def checked_out(
    ref: str,
    repo_path: str,
    runner: Optional[GitRunner] = None,
) -> Iterator[str]:
    """
    Check out ref for the duration of the block, then go back.

    Yields the ref that was active before the switch. The original ref
    is checked out again however the block exits. When the block raised
    and going back fails as well, the block's error wins and the restore
    failure is only logged.
    """

    runner = _runner_or_default(runner)
    original_ref = get_current_ref(repo_path, runner)
    LOG.debug("Original ref in %s is %s", repo_path, original_ref)

    checkout(ref, repo_path, runner)
    try:
        yield original_ref
    except BaseException:
        try:
            checkout(original_ref, repo_path, runner)
        except GitError as exc:
            LOG.error(
                "Failed to return to original ref %s after error: %s",
                original_ref,
                exc,
            )
        raise

    checkout(original_ref, repo_path, runner)
