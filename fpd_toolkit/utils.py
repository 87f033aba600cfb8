"""Shared console and logging helpers for the FPD Toolkit.

User-facing output goes through a Rich ``Console``; diagnostics go through the
standard ``logging`` module, rendered by Rich on stderr.  ``--verbose`` only
changes the log level, never program behaviour.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import PurePosixPath

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.tree import Tree

console = Console()
err_console = Console(stderr=True)

LOGGER_NAME = "fpd_toolkit"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a Rich handler to the toolkit logger.

    Args:
        verbose: Emit DEBUG diagnostics when ``True``; only warnings otherwise.

    Returns:
        The configured ``fpd_toolkit`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=err_console,
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message on stderr."""
    err_console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    console.print(message)


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def build_path_tree(label: str, paths: Iterable[str]) -> Tree:
    """Build a Rich ``Tree`` from relative POSIX paths.

    Directories are shown with a trailing ``/``.  Paths are inserted in sorted
    order so the rendering is stable.

    Examples::

        build_path_tree("geo_sensor", ["lib/", "lib/geo_sensor.dart"])
    """
    root = Tree(f"[bold]{label}/[/bold]")
    nodes: dict[str, Tree] = {}

    for raw in sorted(set(paths)):
        is_dir = raw.endswith("/")
        parts = PurePosixPath(raw.rstrip("/")).parts
        parent = root
        prefix = ""
        for index, part in enumerate(parts):
            prefix = f"{prefix}/{part}" if prefix else part
            last = index == len(parts) - 1
            if prefix not in nodes:
                text = part + ("/" if (not last or is_dir) else "")
                nodes[prefix] = parent.add(text)
            parent = nodes[prefix]
    return root
