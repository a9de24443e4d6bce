"""Version parsing and per-build-type validation.

Accepted shapes (an optional leading ``v`` is stripped):

- stable release:      ``0.81.1``
- stable pre-release:  ``0.81.0-rc.4``
- nightly:             ``0.82.0-nightly-20230420-1a2b3c4d5``
- main:                ``1000.0.0`` (optionally with a commit suffix)
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

from rnpublish.services.publish.errors import InvalidVersionError
from rnpublish.services.publish.model import BUILD_TYPES, BuildType, ParsedVersion


_VERSION_RE = re.compile(r"^v?((0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)(?:-(.+))?)$")
_RC_RE = re.compile(r"^rc\.(0|[1-9]\d*)$")
_LEADING_MAJOR_MINOR_RE = re.compile(r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.")

_MAIN_VERSION = (1000, 0, 0)
_NIGHTLY_PREFIX = "nightly-"

SHORT_COMMIT_LENGTH = 9

_BUILD_TYPE_LABELS: dict[BuildType, str] = {
    "dry-run": "Dry-run",
    "nightly": "Nightly",
    "release": "Release",
}


def parse_version(version_str: str, build_type: BuildType) -> ParsedVersion:
    """Parse ``version_str`` and check it is publishable as ``build_type``.

    Raises:
        InvalidVersionError: unparseable, or not valid for the build type.
    """
    validate_build_type(build_type)

    m = _VERSION_RE.match(version_str.strip())
    if m is None:
        raise InvalidVersionError(
            f"You must pass a correctly formatted version; couldn't parse {version_str}"
        )
    parsed = ParsedVersion(
        version=m.group(1),
        major=int(m.group(2)),
        minor=int(m.group(3)),
        patch=int(m.group(4)),
        prerelease=m.group(5),
    )

    if not is_valid_for(parsed, build_type):
        raise InvalidVersionError(
            f"Version {parsed.version} is not valid for {_BUILD_TYPE_LABELS[build_type]}"
        )
    return parsed


def validate_build_type(build_type: str) -> None:
    if build_type not in BUILD_TYPES:
        raise ValueError(f"Unsupported build type: {build_type}")


def is_valid_for(parsed: ParsedVersion, build_type: BuildType) -> bool:
    match build_type:
        case "release":
            return is_stable_release(parsed) or is_stable_prerelease(parsed)
        case "nightly" | "dry-run":
            return (
                is_main(parsed)
                or is_nightly(parsed)
                or is_stable_release(parsed)
                or is_stable_prerelease(parsed)
            )


def is_stable_release(parsed: ParsedVersion) -> bool:
    return parsed.major == 0 and parsed.prerelease is None


def is_stable_prerelease(parsed: ParsedVersion) -> bool:
    return (
        parsed.major == 0
        and parsed.prerelease is not None
        and _RC_RE.match(parsed.prerelease) is not None
    )


def is_nightly(parsed: ParsedVersion) -> bool:
    return (
        parsed.major == 0
        and parsed.prerelease is not None
        and parsed.prerelease.startswith(_NIGHTLY_PREFIX)
    )


def is_main(parsed: ParsedVersion) -> bool:
    return (parsed.major, parsed.minor, parsed.patch) == _MAIN_VERSION


def next_minor_version(version_str: str) -> str | None:
    """``0.81.0-rc.1`` -> ``0.82.0``; None if no leading major.minor."""
    m = _LEADING_MAJOR_MINOR_RE.match(version_str.strip())
    if m is None:
        return None
    return f"{int(m.group(1))}.{int(m.group(2)) + 1}.0"


def short_commit(sha: str) -> str:
    return sha[:SHORT_COMMIT_LENGTH]


def date_identifier(now: datetime) -> str:
    """UTC calendar date as ``YYYYMMDD``."""
    return now.astimezone(UTC).strftime("%Y%m%d")
