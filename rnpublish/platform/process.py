"""Subprocess execution for the publish flow.

Two entry points:

- ``run``: list-based, captures output, returns a Result. Used for git
  queries where only stdout matters.
- ``ShellRunner.exec``: takes a command line the way it would be typed
  (``npm publish --tag next``), returns the exit code and stdout. Used for
  the publish steps, whose exit code becomes the process exit code.

Usage:
    shell = ShellRunner(root=Path("."))
    result = shell.exec("npm view react-native dist-tags.next", silent=True)
    if result.code == 0:
        print(result.stdout.strip())
"""

from __future__ import annotations

import os
import shlex
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from rnpublish.core.result import Err, Ok, Result

__all__ = [
    "COMMAND_NOT_FOUND",
    "CommandResult",
    "ProcessError",
    "ShellRunner",
    "ShellRunnerProtocol",
    "run",
]

# Exit code reported when a command cannot be started (same as POSIX shells)
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed ``run`` call.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never ran).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of ``ShellRunner.exec``.

    ``stdout`` and ``stderr`` are only populated for silent (captured) runs.
    """

    code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.code == 0


class ShellRunnerProtocol(Protocol):
    """What the publish flow needs from a command runner."""

    def exec(
        self,
        command: str,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        silent: bool = False,
    ) -> CommandResult: ...


class ShellRunner:
    """Runs command lines from the repository root.

    Commands are split with shlex and executed without a shell, so
    pipes and globbing are not available.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def exec(
        self,
        command: str,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        silent: bool = False,
    ) -> CommandResult:
        """Run ``command`` and wait for it.

        Args:
            command: Command line, e.g. ``npm publish --tag nightly``.
            cwd: Working directory; relative paths resolve against the
                repository root, None means the root itself.
            env: Extra environment variables layered over os.environ.
            silent: Capture output instead of streaming it to the terminal.
        """
        argv = shlex.split(command)
        workdir = self.root / cwd if cwd is not None else self.root
        full_env = {**os.environ, **env} if env else None

        try:
            proc = subprocess.run(
                argv,
                cwd=str(workdir),
                env=full_env,
                capture_output=silent,
                text=True,
                check=False,
            )
        except OSError as e:
            return CommandResult(code=COMMAND_NOT_FOUND, stderr=str(e))

        if silent:
            return CommandResult(code=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
        return CommandResult(code=proc.returncode)
