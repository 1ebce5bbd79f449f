"""Config command implementation.

Shows the effective configuration and writes a starter config file.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from keysync.cli.context import get_config_path, require_config
from keysync.core.config import ENV_OVERRIDES, KeysyncConfig, save_config
from keysync.core.paths import get_config_path as default_config_path
from keysync.errors import ConfigError
from keysync.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize keysync configuration.",
    no_args_is_help=True,
)


def _display_values(config: KeysyncConfig) -> dict[str, str]:
    """Effective settings as display strings, with the token masked."""
    return {
        "keydir": str(config.keydir),
        "server_url": config.server_url,
        "token": "********" if config.token else "-",
        "timeout_seconds": str(config.timeout_seconds),
    }


@app.command()
def show(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show the effective configuration."""
    config = require_config(ctx)
    values = _display_values(config)

    if json_output:
        console.print_json(json.dumps(values))
        return

    env_by_field = {field: env for env, field in ENV_OVERRIDES.items()}

    table = Table(
        title="keysync Configuration",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")
    table.add_column("Environment", style="muted")
    for field, value in values.items():
        table.add_row(field, value, env_by_field.get(field, ""))

    console.print(table)
    print_info(f"Config file: {get_config_path(ctx) or default_config_path()}")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write the effective configuration to the config file."""
    path = get_config_path(ctx) or default_config_path()
    if path.exists() and not force:
        print_error(f"Config file already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    config = require_config(ctx)
    try:
        saved = save_config(config, path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
