"""Rendering for command results: Rich tables, or JSON under ``--json``."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table

if TYPE_CHECKING:
    from rbd_form.cli._context import CliContext

Columns = list[tuple[str, str]]


def print_result(
    ctx: CliContext,
    data: dict[str, Any] | list[dict[str, Any]],
    *,
    columns: Columns | None = None,
    title: str = "",
) -> None:
    """Render a mapping as key/value rows, or a list of records as a table.

    Lists need *columns*, given as ``(header, key)`` pairs.
    """
    if ctx.json_mode:
        ctx.console.print_json(json.dumps(data, default=str))
        return

    table = Table(title=title or None, show_header=isinstance(data, list))
    if isinstance(data, dict):
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(str(key), _cell(value))
    else:
        for header, _ in columns or []:
            table.add_column(header)
        for record in data:
            table.add_row(*(_cell(record.get(key)) for _, key in columns or []))
    ctx.console.print(table)


def print_success(ctx: CliContext, message: str) -> None:
    ctx.err_console.print(f"[green]{message}[/green]")


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, (list, tuple, frozenset, set)):
        return ", ".join(map(str, value)) or "-"
    return str(value)
