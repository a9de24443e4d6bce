"""Source control queries used when publishing.

Usage:
    scm = SourceControl(Path("."))
    sha = scm.current_commit()

    match scm.exit_if_not_on_git(lambda: scm.is_tagged_latest(sha), "Not in git"):
        case Ok(is_latest):
            print("latest" if is_latest else "older release line")
        case Err(e):
            print(e.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeVar

from rnpublish.core.result import Err, Ok, Result
from rnpublish.platform.process import ProcessError
from rnpublish.platform.process import run as run_process

R = TypeVar("R")

_GIT_TIMEOUT_SECONDS = 30.0

# Commit reported when running outside a checkout (e.g. from a source tarball)
PLACEHOLDER_COMMIT = "TEMP"

# Git tag that marks the newest stable release
LATEST_TAG = "latest"

__all__ = [
    "LATEST_TAG",
    "PLACEHOLDER_COMMIT",
    "GitError",
    "SourceControl",
    "SourceControlProtocol",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed (empty for guard failures)
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class SourceControlProtocol(Protocol):
    def current_commit(self) -> str: ...

    def is_tagged_latest(self, commit: str) -> bool: ...

    def exit_if_not_on_git(
        self, action: Callable[[], R], message: str
    ) -> Result[R, GitError]: ...


class SourceControl:
    """Git checkout the release is cut from.

    Attributes:
        path: Any directory inside the checkout
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_git_repo(self) -> bool:
        """True if ``path`` is inside a git work tree."""
        result = self._run(["rev-parse", "--is-inside-work-tree"])
        match result:
            case Ok(stdout):
                return stdout.strip() == "true"
            case Err(_):
                return False

    def current_commit(self) -> str:
        """Full hash of HEAD, or PLACEHOLDER_COMMIT outside a checkout."""
        if not self.is_git_repo():
            return PLACEHOLDER_COMMIT
        result = self._run(["rev-parse", "HEAD"])
        match result:
            case Ok(stdout):
                return stdout.strip()
            case Err(_):
                return PLACEHOLDER_COMMIT

    def is_tagged_latest(self, commit: str) -> bool:
        """True if the ``latest`` tag points at ``commit``.

        A missing tag counts as not latest.
        """
        if not commit:
            return False
        result = self._run(["rev-list", "-1", LATEST_TAG])
        match result:
            case Ok(stdout):
                return stdout.strip() == commit
            case Err(_):
                return False

    def exit_if_not_on_git(self, action: Callable[[], R], message: str) -> Result[R, GitError]:
        """Run ``action`` only inside a git checkout.

        Returns:
            Ok(action()) inside a checkout
            Err(GitError) carrying ``message`` otherwise
        """
        if not self.is_git_repo():
            return Err(GitError(command="", message=message))
        return Ok(action())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        return run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, timeout=_GIT_TIMEOUT_SECONDS
        )
