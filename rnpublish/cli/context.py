from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from rnpublish.core.config import CONFIG_FILENAME, PublishConfig, PublishEnv, load_config_or_default
from rnpublish.core.errors import ErrorCode
from rnpublish.core.result import Err
from rnpublish.git.scm import SourceControl
from rnpublish.output.console import ConsoleProtocol, RichConsole
from rnpublish.platform.process import ShellRunner
from rnpublish.services.publish.maven import GradleArtifactPublisher

REPO_ROOT_ENV = "RN_REPO_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    config: PublishConfig
    env: PublishEnv
    console: ConsoleProtocol
    shell: ShellRunner
    scm: SourceControl
    artifacts: GradleArtifactPublisher


def resolve_repo_root() -> Path:
    """``RN_REPO_ROOT`` if set (see ``--repo-root``), else the current directory."""
    root = os.environ.get(REPO_ROOT_ENV)
    if root:
        return Path(root).expanduser().resolve()
    return Path.cwd().resolve()


def build_context() -> CLIContext:
    repo_root = resolve_repo_root()

    config_result = load_config_or_default(repo_root / CONFIG_FILENAME)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    config = config_result.value

    env = PublishEnv.from_environ(os.environ)
    console = RichConsole()
    shell = ShellRunner(root=repo_root)

    return CLIContext(
        repo_root=repo_root,
        config=config,
        env=env,
        console=console,
        shell=shell,
        scm=SourceControl(repo_root),
        artifacts=GradleArtifactPublisher(
            shell=shell,
            config=config.maven,
            env=env,
            console=console,
        ),
    )
