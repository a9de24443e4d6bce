"""Android artifacts published alongside the npm package.

The npm package and the ``react-android`` Maven artifacts share a version.
Artifacts are first staged in a local Maven repository, checked, then
pushed to Sonatype: nightlies as snapshots, stable versions through a
staging repository that is closed and released.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Protocol

from rnpublish.core.config import MavenConfig, PublishEnv
from rnpublish.core.result import Err, Ok, Result
from rnpublish.output.console import ConsoleProtocol
from rnpublish.platform.process import ShellRunnerProtocol
from rnpublish.services.publish.errors import PublishError

__all__ = [
    "ARTIFACT_SUFFIXES",
    "ArtifactPublisherProtocol",
    "GradleArtifactPublisher",
    "expected_artifacts",
]

ARTIFACT_SUFFIXES: tuple[str, ...] = (
    ".module",
    ".pom",
    "-debug.aar",
    "-release.aar",
    "-debug-sources.jar",
    "-release-sources.jar",
)

SIGNING_KEY_GRADLE_ENV = "ORG_GRADLE_PROJECT_SIGNING_KEY"

# Maven Central is immutable; the 1000.x main-line placeholder must never land there.
_PLACEHOLDER_MAJOR_PREFIX = "1000."


class ArtifactPublisherProtocol(Protocol):
    def generate(self, version: str) -> Result[None, PublishError]: ...

    def publish(self, version: str, *, is_nightly: bool) -> Result[None, PublishError]: ...


def expected_artifacts(config: MavenConfig, version: str) -> list[Path]:
    """Files the local Maven publish must produce for ``version``."""
    base = Path(config.local_dir) / config.group_path / config.artifact / version
    return [base / f"{config.artifact}-{version}{suffix}" for suffix in ARTIFACT_SUFFIXES]


def decode_signing_key(encoded: str | None) -> Result[str, PublishError]:
    if encoded is None:
        return Err(
            PublishError(
                kind="signing_key_missing",
                message="Missing signing key for Maven Central",
                hint="Set ORG_GRADLE_PROJECT_SIGNING_KEY_ENCODED (base64)",
            )
        )
    try:
        return Ok(base64.b64decode(encoded, validate=False).decode("ascii"))
    except (binascii.Error, ValueError) as e:
        return Err(
            PublishError(
                kind="signing_key_invalid",
                message="Signing key is not valid base64-encoded ASCII",
                hint=str(e),
            )
        )


class GradleArtifactPublisher:
    """Builds and publishes the Android artifacts with the Gradle wrapper."""

    def __init__(
        self,
        *,
        shell: ShellRunnerProtocol,
        config: MavenConfig,
        env: PublishEnv,
        console: ConsoleProtocol,
    ) -> None:
        self._shell = shell
        self._config = config
        self._env = env
        self._console = console

    def generate(self, version: str) -> Result[None, PublishError]:
        """Stage the artifacts in the local Maven repository and check them."""
        self._console.info(f"Generating Android artifacts inside {self._config.local_dir}")
        result = self._shell.exec("./gradlew publishAllToMavenTempLocal -q")
        if not result.ok:
            return Err(
                PublishError(
                    kind="gradle_failed",
                    message="Could not generate artifacts",
                    returncode=result.code,
                )
            )

        for path in expected_artifacts(self._config, version):
            if not path.exists():
                return Err(
                    PublishError(
                        kind="artifacts_missing",
                        message=f"Failing as expected file: {path} was not correctly generated.",
                    )
                )

        self._console.print("Generated artifacts for Maven")
        return Ok(None)

    def publish(self, version: str, *, is_nightly: bool) -> Result[None, PublishError]:
        """Push the staged artifacts to Sonatype."""
        if version.startswith(_PLACEHOLDER_MAJOR_PREFIX):
            return Err(
                PublishError(
                    kind="placeholder_version",
                    message=f"Refusing to publish {version} to Maven Central",
                )
            )

        key_r = decode_signing_key(self._env.signing_key_encoded)
        if isinstance(key_r, Err):
            return key_r
        gradle_env = {SIGNING_KEY_GRADLE_ENV: key_r.value}

        if is_nightly:
            command = "./gradlew publishAllToSonatype -PisNightly=true"
            failure = "Failed to publish artifacts to Sonatype (Maven Central)"
        else:
            command = "./gradlew publishAllToSonatype closeAndReleaseSonatypeStagingRepository"
            failure = (
                "Failed to close and release the staging repository on Sonatype (Maven Central)"
            )

        result = self._shell.exec(command, env=gradle_env)
        if not result.ok:
            return Err(PublishError(kind="gradle_failed", message=failure, returncode=result.code))

        self._console.success("Published artifacts to Maven Central")
        return Ok(None)
