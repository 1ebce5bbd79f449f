"""Shared helpers for CLI commands.

Resolves the configuration selected by the global options and wires the
integration the commands operate on.
"""

from pathlib import Path

import typer

from keysync.core.config import KeysyncConfig, load_config
from keysync.core.integration import KeyfileIntegration
from keysync.errors import ConfigError
from keysync.utils.formatting import print_error


def get_config_path(ctx: typer.Context) -> Path | None:
    """Return the --config path given to the root command, if any."""
    obj = ctx.find_root().obj or {}
    return obj.get("config_path")


def require_config(ctx: typer.Context) -> KeysyncConfig:
    """Load the effective configuration or exit.

    Raises:
        typer.Exit: If the configuration is malformed.
    """
    try:
        return load_config(get_config_path(ctx))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def get_integration(ctx: typer.Context) -> KeyfileIntegration:
    """Build the integration for the effective configuration."""
    return KeyfileIntegration.from_config(require_config(ctx))
