"""Publish commands - stamp, build and publish react-native."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import cast

import typer

from rnpublish.cli.context import build_context
from rnpublish.core.errors import ErrorCode
from rnpublish.core.result import Err, Ok
from rnpublish.output.console import Style
from rnpublish.services.publish.errors import InvalidVersionError
from rnpublish.services.publish.model import BuildType
from rnpublish.services.publish.npm import get_npm_info
from rnpublish.services.publish.service import publish_npm


class BuildTypeArg(StrEnum):
    dry_run = "dry-run"
    nightly = "nightly"
    release = "release"


def publish(
    build_type: BuildTypeArg = typer.Argument(..., help="Build type: dry-run|nightly|release"),
) -> None:
    """Set the version and publish to npm (and Maven Central)."""
    ctx = build_context()

    try:
        code = publish_npm(
            cast(BuildType, build_type.value),
            shell=ctx.shell,
            scm=ctx.scm,
            artifacts=ctx.artifacts,
            console=ctx.console,
            config=ctx.config,
            env=ctx.env,
        )
    except InvalidVersionError as e:
        ctx.console.error(str(e))
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    raise typer.Exit(code=code)


def info(
    build_type: BuildTypeArg = typer.Argument(..., help="Build type: dry-run|nightly|release"),
) -> None:
    """Show the version and dist-tag a publish would use."""
    ctx = build_context()

    try:
        result = get_npm_info(
            cast(BuildType, build_type.value),
            shell=ctx.shell,
            scm=ctx.scm,
            config=ctx.config,
            env=ctx.env,
            now=datetime.now(UTC),
        )
    except InvalidVersionError as e:
        ctx.console.error(str(e))
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    match result:
        case Ok(npm_info):
            ctx.console.print(f"version: {npm_info.version}")
            ctx.console.print(f"tag: {npm_info.tag or '-'}", Style.DIM)
        case Err(error):
            ctx.console.error(error.message)
            if error.hint:
                ctx.console.print(f"hint: {error.hint}", Style.DIM)
            raise typer.Exit(code=error.returncode)
