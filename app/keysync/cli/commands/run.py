"""Run command implementation.

Executes reconciliation cycles: once by default, or on a fixed interval.
"""

import asyncio
from typing import Annotated

import typer

from keysync.cli.context import get_integration
from keysync.core.integration import CycleResult
from keysync.errors import CycleError, KeyStoreError
from keysync.utils.formatting import print_error, print_info, print_success

app = typer.Typer(
    help="Reconcile the key directory with the user directory.",
    invoke_without_command=True,
)


def _print_cycle_summary(result: CycleResult) -> None:
    """Print the outcome of a single cycle."""
    if result.diff.is_in_sync:
        print_success("Key directory is in sync with the user directory.")
        return

    if result.dry_run:
        print_info(f"Dry run: {result.diff.total_changes} change(s) would be applied.")
        return

    upserts = sum(1 for r in result.results if r.action.is_upsert)
    deletes = sum(1 for r in result.results if r.action.is_delete)
    print_success(f"Wrote {upserts} key file(s), deleted {deletes} key file(s).")


@app.callback(invoke_without_command=True)
def run_cycles(
    ctx: typer.Context,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Log what would change without touching any file.",
        ),
    ] = False,
    interval: Annotated[
        float | None,
        typer.Option(
            "--interval",
            "-i",
            min=1.0,
            help="Keep running, sleeping this many seconds between cycles.",
        ),
    ] = None,
) -> None:
    """Reconcile the key directory with the user directory.

    Writes a key file for every user whose key is missing or differs and
    deletes key files without a matching user. The first failing file
    operation aborts the cycle.

    Examples:
        keysync run                  # One cycle
        keysync run --dry-run        # Log the diff only
        keysync run --interval 300   # Reconcile every five minutes
    """
    if ctx.invoked_subcommand is not None:
        return

    integration = get_integration(ctx)

    try:
        integration.setup()
    except KeyStoreError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if interval is not None:
        try:
            asyncio.run(integration.run_forever(interval, dry_run=dry_run))
        except KeyboardInterrupt:
            print_info("Stopped.")
        return

    try:
        result = asyncio.run(integration.run_cycle(dry_run=dry_run))
    except CycleError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    _print_cycle_summary(result)
