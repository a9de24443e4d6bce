"""Result type returned by collaborators that can fail.

Shell, git and Gradle helpers report failures as values so the publish flow
can turn them into console messages and exit codes in one place.

Usage:
    match scm.exit_if_not_on_git(lambda: scm.is_tagged_latest(sha), "not in git"):
        case Ok(is_latest):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

__all__ = ["Err", "Ok", "Result"]

T = TypeVar("T")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    def map_err(self, f: Callable[[Any], F]) -> Ok[T]:
        return self

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying ``error``."""

    error: E

    def map_err(self, f: Callable[[E], F]) -> Err[F]:
        """Transform the carried error (e.g. GitError -> PublishError)."""
        return Err(f(self.error))

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]
