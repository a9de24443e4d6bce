"""Console output for publish runs.

The publish flow only talks to ``ConsoleProtocol``; ``RichConsole`` renders
to the terminal and ``MockConsole`` records messages for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Sink for publish progress and outcome messages."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class RichConsole:
    """Terminal console backed by Rich."""

    def __init__(self, *, stderr: bool = False) -> None:
        # Import Rich lazily to keep `rnpublish --version` fast
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        # Messages carry backticks and brackets from command lines; no markup.
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self.print(message, Style.SUCCESS)

    def error(self, message: str) -> None:
        self.print(message, Style.ERROR)

    def warning(self, message: str) -> None:
        self.print(message, Style.WARNING)

    def info(self, message: str) -> None:
        self.print(message, Style.INFO)


@dataclass
class OutputRecord:
    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console that records output instead of printing it."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.print(message, Style.SUCCESS)

    def error(self, message: str) -> None:
        self.print(message, Style.ERROR)

    def warning(self, message: str) -> None:
        self.print(message, Style.WARNING)

    def info(self, message: str) -> None:
        self.print(message, Style.INFO)

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """All records whose message contains ``substring``."""
        return [o for o in self.outputs if substring in o.message]
