from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


BuildType = Literal["dry-run", "nightly", "release"]

BUILD_TYPES: tuple[BuildType, ...] = ("dry-run", "nightly", "release")

# npm dist-tags the flow publishes under (besides `<major>.<minor>-stable`)
NIGHTLY_TAG = "nightly"
NEXT_TAG = "next"
LATEST_TAG = "latest"


@dataclass(frozen=True, slots=True)
class NpmInfo:
    """Version to stamp and dist-tag to publish under.

    ``tag`` is None for dry runs, which never reach `npm publish`.
    """

    version: str
    tag: str | None


@dataclass(frozen=True, slots=True)
class ParsedVersion:
    version: str  # without any leading "v"
    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    @property
    def release_branch_tag(self) -> str:
        """Dist-tag for patch releases on an older line, e.g. ``0.81-stable``."""
        return f"{self.major}.{self.minor}-stable"
