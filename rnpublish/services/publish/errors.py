from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from rnpublish.core.errors import ErrorCode


@dataclass(frozen=True, slots=True)
class PublishError:
    """A publish step that failed without raising.

    ``returncode`` becomes the process exit code.
    """

    kind: Literal[
        "npm_view_failed",
        "invalid_next_version",
        "not_on_git",
        "artifacts_missing",
        "gradle_failed",
        "signing_key_missing",
        "signing_key_invalid",
        "placeholder_version",
    ]
    message: str
    hint: str | None = None
    returncode: int = int(ErrorCode.PUBLISH_ERROR)


class InvalidVersionError(ValueError):
    """A version string that cannot be published for the requested build type."""
