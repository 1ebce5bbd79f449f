"""Diff command implementation.

Runs one dry-run cycle and shows which key files would change.
"""

import asyncio
import json
from typing import Annotated

import typer
from rich.table import Table

from keysync.cli.context import get_integration
from keysync.core.diff import DiffEntry, DiffResult, DiffType
from keysync.errors import CycleError
from keysync.utils.formatting import (
    console,
    print_error,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Compare the key directory with the user directory.",
    invoke_without_command=True,
)

# DiffType -> (icon, style, note)
_DISPLAY: dict[DiffType, tuple[str, str, str]] = {
    DiffType.CREATE: ("[+]", "added", "No key file yet"),
    DiffType.UPDATE: ("[~]", "changed", "Key differs"),
    DiffType.DELETE: ("[x]", "removed", "No matching user"),
}


def _create_diff_table(entries: list[DiffEntry]) -> Table:
    """Create a table for displaying diff results.

    Args:
        entries: Entries to display, already ordered.

    Returns:
        Rich Table configured for diff display.
    """
    table = Table(
        title="Key File Differences",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Key File", no_wrap=True)
    table.add_column("Note")

    for entry in entries:
        icon, style, note = _DISPLAY[entry.diff_type]
        table.add_row(
            f"[{style}]{icon}[/{style}]",
            f"[{style}]{entry.name}[/{style}]",
            f"[muted]{note}[/muted]",
        )
    return table


def _print_summary(result: DiffResult) -> None:
    """Print summary line for diff results."""
    parts: list[str] = []
    if result.create:
        parts.append(f"[added]{len(result.create)} to create[/added]")
    if result.update:
        parts.append(f"[changed]{len(result.update)} to update[/changed]")
    if result.delete:
        parts.append(f"[removed]{len(result.delete)} to delete[/removed]")

    summary = ", ".join(parts)
    console.print(f"\nSummary: {summary} ({result.total_changes} total changes)")


@app.callback(invoke_without_command=True)
def diff_keys(
    ctx: typer.Context,
    brief: Annotated[
        bool,
        typer.Option(
            "--brief",
            "-b",
            help="Show summary counts only.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Compare the key directory with the user directory.

    Nothing is written. Difference types:
      [+] CREATE: User has no key file yet
      [~] UPDATE: Key file content differs from the user's key
      [x] DELETE: Key file has no matching user

    Examples:
        keysync diff               # Show all differences
        keysync diff --brief       # Summary counts only
        keysync diff --json        # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    integration = get_integration(ctx)

    try:
        cycle = asyncio.run(integration.run_cycle(dry_run=True))
    except CycleError as e:
        print_error(str(e))
        if e.phase == "current":
            print_warning("Run 'keysync setup' to create the key directory.")
        raise typer.Exit(code=1) from e

    result = cycle.diff

    if json_output:
        console.print_json(json.dumps(result.to_dict()))
        return

    if result.is_in_sync:
        print_success("Key directory is in sync with the user directory.")
        return

    if brief:
        console.print(f"[added]Create:[/added] {len(result.create)}")
        console.print(f"[changed]Update:[/changed] {len(result.update)}")
        console.print(f"[removed]Delete:[/removed] {len(result.delete)}")
        console.print(f"[muted]Total changes: {result.total_changes}[/muted]")
        return

    entries = sorted((*result.create, *result.update, *result.delete), key=lambda e: e.name)
    console.print(_create_diff_table(entries))
    _print_summary(result)
