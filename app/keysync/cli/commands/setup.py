"""Setup command implementation.

Creates the key directory so the first cycle has somewhere to write.
"""

import typer

from keysync.cli.context import get_integration
from keysync.errors import KeyStoreError
from keysync.utils.formatting import print_error, print_success

app = typer.Typer(
    help="Create the key directory.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def setup_keydir(ctx: typer.Context) -> None:
    """Create the key directory if it doesn't exist.

    Safe to run repeatedly.

    Examples:
        keysync setup
        KEYSYNC_KEYDIR=/srv/keys keysync setup
    """
    if ctx.invoked_subcommand is not None:
        return

    integration = get_integration(ctx)
    try:
        integration.setup()
    except KeyStoreError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Key directory ready: {integration.store.root}")
