"""Process execution helpers."""

from .process import CommandResult, ProcessError, ShellRunner, ShellRunnerProtocol, run

__all__ = ["CommandResult", "ProcessError", "ShellRunner", "ShellRunnerProtocol", "run"]
