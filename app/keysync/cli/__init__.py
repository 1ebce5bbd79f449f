"""CLI package for keysync.

This package contains the Typer application and all subcommands.
"""

from keysync.cli.main import app

__all__ = ["app"]
