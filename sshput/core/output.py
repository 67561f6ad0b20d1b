"""Output formatting for sshput.

JSON, table and quiet rendering on a shared Rich console. Status messages go
to stderr so JSON on stdout stays parseable.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from enum import Enum
from typing import Any

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.rule import Rule
from rich.table import Table

# =============================================================================
# Console Instances
# =============================================================================

console = Console()
err_console = Console(stderr=True)

# Rich markup per TransferStatus value
STATUS_STYLES = {
    "ok": "[green]✓ ok[/green]",
    "error": "[red]✗ error[/red]",
    "skipped": "[yellow]- skipped[/yellow]",
}

MASKED = "********"


class OutputFormat(Enum):
    """Output format options."""

    JSON = "json"
    TABLE = "table"

    @classmethod
    def from_string(cls, value: str) -> OutputFormat:
        return cls(value.lower())


# =============================================================================
# Table Output
# =============================================================================


def _label(key: str) -> str:
    return key.replace("_", " ").title()


def _cell(column: str, value: Any) -> str:
    if column == "status" and value in STATUS_STYLES:
        return STATUS_STYLES[value]
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def print_table(
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    *,
    title: str | None = None,
) -> None:
    """Print rows as a Rich table.

    Args:
        rows: One dict per row.
        columns: Keys to show, in order. A ``status`` column is colored.
        title: Optional table title.
    """
    if not rows:
        console.print("[dim]No results[/dim]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    for col in columns:
        table.add_column(_label(col))
    for row in rows:
        table.add_row(*(_cell(col, row.get(col)) for col in columns))

    console.print(table)


def print_key_value(data: dict[str, Any], *, title: str | None = None) -> None:
    """Print aligned ``Key  value`` lines, e.g. a run summary."""
    if title:
        console.print(f"[bold]{title}[/bold]")

    width = max((len(_label(k)) for k in data), default=0)
    for key, value in data.items():
        if value is None:
            value = "[dim]-[/dim]"
        elif isinstance(value, bool):
            value = "[green]Yes[/green]" if value else "[red]No[/red]"
        elif isinstance(value, (list, dict)):
            value = ", ".join(value) if isinstance(value, list) else json.dumps(value)
        console.print(f"  {_label(key):<{width}}  {value}")


def print_rule(title: str = "") -> None:
    """Print a horizontal separator with an optional title."""
    console.print(Rule(title))


# =============================================================================
# JSON / Unified Output
# =============================================================================


def print_json(data: Any, *, indent: int = 2) -> None:
    """Print data as JSON on plain stdout."""
    print(json.dumps(data, indent=indent, default=str))


def print_output(
    data: Any,
    *,
    format: OutputFormat = OutputFormat.TABLE,
    quiet: bool = False,
    id_field: str = "remote_path",
) -> None:
    """Print a dict or list of dicts in the requested format.

    Args:
        data: Data to print.
        format: Output format.
        quiet: Print only ``id_field`` of each item, one per line.
        id_field: Field printed in quiet mode.
    """
    if quiet:
        for item in data if isinstance(data, list) else [data]:
            print(item.get(id_field, "") if isinstance(item, dict) else item)
        return

    if format == OutputFormat.JSON or not isinstance(data, dict):
        print_json(data)
    else:
        print_key_value(data)


# =============================================================================
# Status Messages
# =============================================================================


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message to stderr."""
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


# =============================================================================
# Progress
# =============================================================================


def create_progress() -> Progress:
    """Create the transient per-file progress bar used by ``put``."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    )
