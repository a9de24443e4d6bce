from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TypeVar

import pytest

from rnpublish.core.config import PublishConfig, PublishEnv
from rnpublish.core.result import Err, Ok, Result
from rnpublish.git.scm import GitError
from rnpublish.output.console import MockConsole, Style
from rnpublish.platform.process import CommandResult
from rnpublish.services.publish.errors import InvalidVersionError, PublishError
from rnpublish.services.publish.service import SKIP_PUBLISH_MESSAGE, publish_npm

R = TypeVar("R")


NOW = datetime(2023, 4, 20, 23, 52, 39, tzinfo=UTC)
PACKAGE_DIR = Path("packages/react-native")


@dataclass
class FakeShell:
    responses: list[CommandResult] = field(default_factory=list)
    calls: list[tuple[str, Path | None]] = field(default_factory=list)

    def exec(
        self,
        command: str,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        silent: bool = False,
    ) -> CommandResult:
        del env, silent
        self.calls.append((command, cwd))
        return self.responses.pop(0)

    @property
    def commands(self) -> list[str]:
        return [c for c, _ in self.calls]


@dataclass
class FakeScm:
    tagged_latest: bool = False
    on_git: bool = True
    latest_queries: int = 0

    def current_commit(self) -> str:
        return "currentco_mmit"

    def is_tagged_latest(self, commit: str) -> bool:
        del commit
        self.latest_queries += 1
        return self.tagged_latest

    def exit_if_not_on_git(
        self, action: Callable[[], R], message: str
    ) -> Result[R, GitError]:
        if not self.on_git:
            return Err(GitError(command="", message=message))
        return Ok(action())


@dataclass
class FakeArtifacts:
    generated: list[str] = field(default_factory=list)
    published: list[tuple[str, bool]] = field(default_factory=list)
    publish_error: PublishError | None = None

    def generate(self, version: str) -> Result[None, PublishError]:
        self.generated.append(version)
        return Ok(None)

    def publish(self, version: str, *, is_nightly: bool) -> Result[None, PublishError]:
        self.published.append((version, is_nightly))
        if self.publish_error is not None:
            return Err(self.publish_error)
        return Ok(None)


def _run(
    build_type: str,
    *,
    shell: FakeShell,
    scm: FakeScm | None = None,
    artifacts: FakeArtifacts | None = None,
    console: MockConsole | None = None,
    env: PublishEnv | None = None,
) -> int:
    return publish_npm(
        build_type,  # type: ignore[arg-type]
        shell=shell,
        scm=scm or FakeScm(),
        artifacts=artifacts or FakeArtifacts(),
        console=console or MockConsole(),
        config=PublishConfig(),
        env=env or PublishEnv(),
        now=NOW,
    )


class TestDryRun:
    def test_sets_version_and_skips_publish(self) -> None:
        shell = FakeShell(responses=[CommandResult(code=0)])
        scm = FakeScm()
        artifacts = FakeArtifacts()
        console = MockConsole()

        code = _run("dry-run", shell=shell, scm=scm, artifacts=artifacts, console=console)

        assert code == 0
        assert shell.commands == [
            "node scripts/set-rn-version.js --to-version 1000.0.0-currentco --build-type dry-run"
        ]
        assert SKIP_PUBLISH_MESSAGE in console.messages
        assert console.messages[-1] == "Skipping `npm publish` because --dry-run is set."
        assert scm.latest_queries == 0
        assert artifacts.published == []

    def test_exits_zero_even_when_set_version_fails(self) -> None:
        shell = FakeShell(responses=[CommandResult(code=3)])
        artifacts = FakeArtifacts()
        console = MockConsole()

        code = _run("dry-run", shell=shell, artifacts=artifacts, console=console)

        assert code == 0
        assert len(shell.calls) == 1
        assert artifacts.published == []
        assert console.find("Failed to set version number to 1000.0.0-currentco")[0].style == (
            Style.WARNING
        )


class TestNightly:
    def test_publishes(self) -> None:
        shell = FakeShell(
            responses=[
                CommandResult(code=0, stdout="0.81.0-rc.1\n"),
                CommandResult(code=0),
                CommandResult(code=0),
            ]
        )
        artifacts = FakeArtifacts()
        console = MockConsole()
        expected = "0.82.0-nightly-20230420-currentco"

        code = _run("nightly", shell=shell, artifacts=artifacts, console=console)

        assert code == 0
        assert shell.commands == [
            "npm view react-native dist-tags.next",
            f"node scripts/set-rn-version.js --to-version {expected} --build-type nightly",
            "npm publish --tag nightly",
        ]
        assert shell.calls[2][1] == PACKAGE_DIR
        assert artifacts.generated == [expected]
        assert artifacts.published == [(expected, True)]
        assert f"Published to npm {expected}" in console.messages

    def test_does_not_send_otp(self) -> None:
        shell = FakeShell(
            responses=[
                CommandResult(code=0, stdout="0.81.0-rc.1\n"),
                CommandResult(code=0),
                CommandResult(code=0),
            ]
        )

        _run("nightly", shell=shell, env=PublishEnv(otp="otp"))

        assert shell.commands[-1] == "npm publish --tag nightly"

    def test_fails_to_set_version(self) -> None:
        shell = FakeShell(
            responses=[
                CommandResult(code=0, stdout="0.81.0-rc.1\n"),
                CommandResult(code=1),
            ]
        )
        artifacts = FakeArtifacts()
        console = MockConsole()
        expected = "0.82.0-nightly-20230420-currentco"

        code = _run("nightly", shell=shell, artifacts=artifacts, console=console)

        assert code == 1
        assert shell.commands == [
            "npm view react-native dist-tags.next",
            f"node scripts/set-rn-version.js --to-version {expected} --build-type nightly",
        ]
        assert artifacts.generated == []
        assert artifacts.published == []
        assert f"Failed to set version number to {expected}" in console.messages

    def test_exit_code_matches_failing_set_version(self) -> None:
        shell = FakeShell(
            responses=[
                CommandResult(code=0, stdout="0.81.0-rc.1\n"),
                CommandResult(code=42),
            ]
        )

        assert _run("nightly", shell=shell) == 42
        assert len(shell.calls) == 2

    def test_npm_view_failure_stops_before_set_version(self) -> None:
        shell = FakeShell(responses=[CommandResult(code=1, stderr="E404")])
        console = MockConsole()

        code = _run("nightly", shell=shell, console=console)

        assert code == 1
        assert len(shell.calls) == 1
        assert console.has_error()
        assert "hint: E404" in console.messages

    def test_maven_failure_skips_npm_publish(self) -> None:
        shell = FakeShell(
            responses=[
                CommandResult(code=0, stdout="0.81.0-rc.1\n"),
                CommandResult(code=0),
            ]
        )
        artifacts = FakeArtifacts(
            publish_error=PublishError(kind="gradle_failed", message="boom", returncode=5)
        )

        code = _run("nightly", shell=shell, artifacts=artifacts)

        assert code == 5
        assert len(shell.calls) == 2


class TestRelease:
    def test_invalid_release_version_raises_before_any_command(self) -> None:
        shell = FakeShell()
        artifacts = FakeArtifacts()

        with pytest.raises(InvalidVersionError, match="Version 1.0.1 is not valid for Release"):
            _run(
                "release",
                shell=shell,
                artifacts=artifacts,
                env=PublishEnv(release_tag="1.0.1"),
            )

        assert shell.calls == []
        assert artifacts.generated == []
        assert artifacts.published == []

    def test_missing_release_tag_raises(self) -> None:
        shell = FakeShell()

        with pytest.raises(InvalidVersionError):
            _run("release", shell=shell, env=PublishEnv())

        assert shell.calls == []

    def test_publishes_non_latest(self) -> None:
        shell = FakeShell(responses=[CommandResult(code=0)])
        artifacts = FakeArtifacts()
        console = MockConsole()

        code = _run(
            "release",
            shell=shell,
            scm=FakeScm(tagged_latest=False),
            artifacts=artifacts,
            console=console,
            env=PublishEnv(release_tag="0.81.1", otp="otp"),
        )

        assert code == 0
        assert shell.calls == [("npm publish --tag 0.81-stable --otp otp", PACKAGE_DIR)]
        assert artifacts.published == [("0.81.1", False)]
        assert "Published to npm 0.81.1" in console.messages

    def test_publishes_latest_stable(self) -> None:
        shell = FakeShell(responses=[CommandResult(code=0)])
        artifacts = FakeArtifacts()

        code = _run(
            "release",
            shell=shell,
            scm=FakeScm(tagged_latest=True),
            artifacts=artifacts,
            env=PublishEnv(release_tag="0.81.1", otp="otp"),
        )

        assert code == 0
        assert shell.calls == [("npm publish --tag latest --otp otp", PACKAGE_DIR)]
        assert artifacts.published == [("0.81.1", False)]

    def test_fails_to_publish_latest_stable(self) -> None:
        shell = FakeShell(responses=[CommandResult(code=1)])
        artifacts = FakeArtifacts()
        console = MockConsole()

        code = _run(
            "release",
            shell=shell,
            scm=FakeScm(tagged_latest=True),
            artifacts=artifacts,
            console=console,
            env=PublishEnv(release_tag="0.81.1", otp="otp"),
        )

        assert code == 1
        assert shell.calls == [("npm publish --tag latest --otp otp", PACKAGE_DIR)]
        assert artifacts.published == [("0.81.1", False)]
        assert "Failed to publish package to npm" in console.messages
        assert not console.find("Published to npm")

    def test_publishes_next_for_release_candidate(self) -> None:
        shell = FakeShell(responses=[CommandResult(code=0)])

        code = _run(
            "release",
            shell=shell,
            scm=FakeScm(tagged_latest=True),
            env=PublishEnv(release_tag="0.81.0-rc.4", otp="otp"),
        )

        assert code == 0
        assert shell.commands == ["npm publish --tag next --otp otp"]

    def test_omits_otp_when_unset(self) -> None:
        shell = FakeShell(responses=[CommandResult(code=0)])

        _run("release", shell=shell, env=PublishEnv(release_tag="0.81.1"))

        assert shell.commands == ["npm publish --tag 0.81-stable"]

    def test_not_on_git_exits_with_env_error(self) -> None:
        shell = FakeShell()
        artifacts = FakeArtifacts()
        console = MockConsole()

        code = _run(
            "release",
            shell=shell,
            scm=FakeScm(on_git=False),
            artifacts=artifacts,
            console=console,
            env=PublishEnv(release_tag="0.81.1", otp="otp"),
        )

        assert code == 2
        assert shell.calls == []
        assert artifacts.published == []
        assert "Not in git. We do not want to publish anything" in console.messages
