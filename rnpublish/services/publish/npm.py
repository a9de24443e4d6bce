from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rnpublish.core.config import NpmConfig, PublishConfig, PublishEnv
from rnpublish.core.errors import ErrorCode
from rnpublish.core.result import Err, Ok, Result
from rnpublish.git.scm import SourceControlProtocol
from rnpublish.platform.process import CommandResult, ShellRunnerProtocol
from rnpublish.services.publish.errors import InvalidVersionError, PublishError
from rnpublish.services.publish.model import (
    LATEST_TAG,
    NEXT_TAG,
    NIGHTLY_TAG,
    BuildType,
    NpmInfo,
    ParsedVersion,
)
from rnpublish.services.publish.version import (
    date_identifier,
    next_minor_version,
    parse_version,
    short_commit,
    validate_build_type,
)

NOT_ON_GIT_MESSAGE = "Not in git. We do not want to publish anything"


def get_next_tag_version(
    shell: ShellRunnerProtocol, package: str
) -> Result[str, PublishError]:
    """Version currently published under the ``next`` dist-tag."""
    result = shell.exec(f"npm view {package} dist-tags.next", silent=True)
    if not result.ok:
        return Err(
            PublishError(
                kind="npm_view_failed",
                message=f"Failed to read the next dist-tag of {package}",
                hint=result.stderr.strip() or None,
                returncode=result.code,
            )
        )
    version = result.stdout.strip()
    if not version:
        return Err(
            PublishError(
                kind="invalid_next_version",
                message=f"{package} has no version under the next dist-tag",
            )
        )
    return Ok(version)


def select_publish_tag(parsed: ParsedVersion, *, is_latest: bool) -> str:
    """Dist-tag for a release version.

    npm tags a publish without ``--tag`` as latest, so patches on an older
    line must carry their ``<major>.<minor>-stable`` tag explicitly.
    """
    if parsed.prerelease is not None:
        return NEXT_TAG
    if is_latest:
        return LATEST_TAG
    return parsed.release_branch_tag


def get_npm_info(
    build_type: BuildType,
    *,
    shell: ShellRunnerProtocol,
    scm: SourceControlProtocol,
    config: PublishConfig,
    env: PublishEnv,
    now: datetime,
) -> Result[NpmInfo, PublishError]:
    """Compute the version and dist-tag for ``build_type``.

    Raises:
        InvalidVersionError: release build whose tag is missing or invalid.
            Raised before any command runs.
    """
    validate_build_type(build_type)

    if build_type == "release":
        if env.release_tag is None:
            raise InvalidVersionError("CIRCLE_TAG is not set; cannot publish a Release")
        parsed = parse_version(env.release_tag, build_type)

        commit = scm.current_commit()
        latest_r = scm.exit_if_not_on_git(
            lambda: scm.is_tagged_latest(commit), NOT_ON_GIT_MESSAGE
        ).map_err(
            lambda e: PublishError(
                kind="not_on_git",
                message=e.message,
                returncode=int(ErrorCode.ENV_ERROR),
            )
        )
        if isinstance(latest_r, Err):
            return latest_r
        tag = select_publish_tag(parsed, is_latest=latest_r.value)
        return Ok(NpmInfo(version=parsed.version, tag=tag))

    commit = short_commit(scm.current_commit())

    if build_type == "dry-run":
        return Ok(NpmInfo(version=f"{config.npm.placeholder_version}-{commit}", tag=None))

    next_r = get_next_tag_version(shell, config.npm.package)
    if isinstance(next_r, Err):
        return next_r
    base = next_minor_version(next_r.value)
    if base is None:
        return Err(
            PublishError(
                kind="invalid_next_version",
                message=f"Cannot derive a nightly version from {next_r.value!r}",
            )
        )
    version = f"{base}-nightly-{date_identifier(now)}-{commit}"
    return Ok(NpmInfo(version=version, tag=NIGHTLY_TAG))


def set_version_command(npm: NpmConfig, version: str, build_type: BuildType) -> str:
    return f"node {npm.set_version_script} --to-version {version} --build-type {build_type}"


def publish_command(*, tag: str | None, otp: str | None) -> str:
    parts = ["npm publish"]
    if tag:
        parts.append(f"--tag {tag}")
    if otp:
        parts.append(f"--otp {otp}")
    return " ".join(parts)


def publish_package(
    shell: ShellRunnerProtocol,
    package_dir: Path,
    *,
    tag: str | None,
    otp: str | None,
) -> CommandResult:
    """Run `npm publish` from the package directory."""
    return shell.exec(publish_command(tag=tag, otp=otp), cwd=package_dir)
