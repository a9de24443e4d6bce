from __future__ import annotations

import os
from pathlib import Path

import typer

from rnpublish import __version__
from rnpublish.cli.commands.publish_cmd import info, publish
from rnpublish.cli.context import REPO_ROOT_ENV
from rnpublish.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(publish)
app.command()(info)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    repo_root: Path | None = typer.Option(
        None,
        "--repo-root",
        help="react-native checkout to publish from (default: current directory)",
    ),
) -> None:
    del version
    if repo_root is not None:
        try:
            root = repo_root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo-root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --repo-root '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[REPO_ROOT_ENV] = str(root)


def main() -> None:
    app()
