"""Publish the react-native npm package for a build type.

``publish_npm`` is the whole release flow. It only touches the outside world
through the collaborators it is given, and returns the exit code the process
should end with:

- dry-run: stamp the placeholder version, never publish, always 0.
- nightly: stamp ``<next minor>-nightly-<date>-<commit>``, publish the
  Android artifacts as a snapshot, `npm publish --tag nightly`.
- release: validate ``CIRCLE_TAG``, publish the Android artifacts, then
  `npm publish --tag <latest|next|X.Y-stable> --otp <otp>`.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from rnpublish.core.config import PublishConfig, PublishEnv
from rnpublish.core.result import Err
from rnpublish.git.scm import SourceControlProtocol
from rnpublish.output.console import ConsoleProtocol, Style
from rnpublish.platform.process import ShellRunnerProtocol
from rnpublish.services.publish.errors import PublishError
from rnpublish.services.publish.maven import ArtifactPublisherProtocol
from rnpublish.services.publish.model import BuildType
from rnpublish.services.publish.npm import get_npm_info, publish_package, set_version_command

SKIP_PUBLISH_MESSAGE = "Skipping `npm publish` because --dry-run is set."
PUBLISH_FAILED_MESSAGE = "Failed to publish package to npm"


def publish_npm(
    build_type: BuildType,
    *,
    shell: ShellRunnerProtocol,
    scm: SourceControlProtocol,
    artifacts: ArtifactPublisherProtocol,
    console: ConsoleProtocol,
    config: PublishConfig,
    env: PublishEnv,
    now: datetime | None = None,
) -> int:
    """Run the publish flow for ``build_type``.

    Returns:
        Process exit code: 0 on success (always for dry-run), otherwise the
        exit code of the step that failed.

    Raises:
        InvalidVersionError: release build with a missing or invalid tag.
            Nothing has run at that point.
    """
    info_r = get_npm_info(
        build_type,
        shell=shell,
        scm=scm,
        config=config,
        env=env,
        now=now or datetime.now(UTC),
    )
    if isinstance(info_r, Err):
        return _report(console, info_r.error)
    version = info_r.value.version

    if build_type in ("dry-run", "nightly"):
        result = shell.exec(set_version_command(config.npm, version, build_type))
        if not result.ok:
            message = f"Failed to set version number to {version}"
            if build_type == "nightly":
                console.error(message)
                return result.code
            console.warning(message)

    if build_type == "dry-run":
        console.print(SKIP_PUBLISH_MESSAGE)
        return 0

    generated = artifacts.generate(version)
    if isinstance(generated, Err):
        return _report(console, generated.error)

    published = artifacts.publish(version, is_nightly=build_type == "nightly")
    if isinstance(published, Err):
        return _report(console, published.error)

    otp = env.otp if build_type == "release" else None
    result = publish_package(
        shell, Path(config.npm.package_dir), tag=info_r.value.tag, otp=otp
    )
    if not result.ok:
        console.error(PUBLISH_FAILED_MESSAGE)
        return result.code

    console.success(f"Published to npm {version}")
    return 0


def _report(console: ConsoleProtocol, error: PublishError) -> int:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    return error.returncode
