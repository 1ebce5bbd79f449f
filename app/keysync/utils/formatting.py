"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from keysync.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log at DEBUG level.
        quiet: Log warnings and errors only. Ignored when verbose is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root = logging.getLogger()
    for existing in root.handlers[:]:
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)

    handler = RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")
