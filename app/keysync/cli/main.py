"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from keysync import __version__
from keysync.cli.commands import config, diff, run, setup
from keysync.utils.formatting import setup_logging

app = typer.Typer(
    name="keysync",
    help="Keep a directory of public-key files in sync with the user directory.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"keysync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only log warnings and errors.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config.toml (default: ~/.config/keysync/config.toml).",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """keysync - one public-key file per user, kept in sync.

    Reads the key directory, fetches users from the user directory, and
    writes, overwrites, or deletes key files until both agree.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path


app.add_typer(setup.app, name="setup")
app.add_typer(diff.app, name="diff")
app.add_typer(run.app, name="run")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
