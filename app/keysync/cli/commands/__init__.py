"""CLI commands for keysync.

This package contains all subcommand implementations.
"""

from keysync.cli.commands import config, diff, run, setup

__all__ = ["config", "diff", "run", "setup"]
