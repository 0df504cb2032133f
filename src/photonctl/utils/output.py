from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from typing import Any, Literal

import typer
import yaml
from rich.console import Console
from rich.table import Table

from photonctl.utils.serialization import to_plain_data

OutputFormat = Literal["json", "yaml", "table"]


def emit(value: Any, *, output: OutputFormat = "json") -> None:
    """Render CLI output as json, yaml, or table."""

    plain = to_plain_data(value)
    if output == "json":
        typer.echo(json.dumps(plain, indent=2))
        return
    if output == "yaml":
        typer.echo(yaml.safe_dump(plain, sort_keys=False), nl=False)
        return

    console = Console()
    if isinstance(plain, list) and plain and all(isinstance(item, dict) for item in plain):
        keys: list[str] = []
        for row in plain:
            assert isinstance(row, dict)
            for key in row:
                key_str = str(key)
                if key_str not in keys:
                    keys.append(key_str)
        table = Table(show_header=True, header_style="bold")
        for key in keys:
            table.add_column(key)
        for row in plain:
            assert isinstance(row, dict)
            table.add_row(*[str(row.get(key, "")) for key in keys])
        console.print(table)
        return

    if isinstance(plain, dict):
        table = Table(show_header=True, header_style="bold")
        table.add_column("key")
        table.add_column("value")
        for key, val in plain.items():
            table.add_row(str(key), str(val))
        console.print(table)
        return

    console.print(str(plain))


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


def print_table(columns: Sequence[str], rows: Iterable[Sequence[Any]], *, total: bool = True) -> None:
    """Human listing: a rich table followed by ``Total: N``."""

    materialized = [list(row) for row in rows]
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    for column in columns:
        table.add_column(column, overflow="fold")
    for row in materialized:
        table.add_row(*[_cell(item) for item in row])
    Console(soft_wrap=True).print(table)
    if total:
        typer.echo(f"\nTotal: {len(materialized)}")


def print_lines(rows: Iterable[Sequence[Any]]) -> None:
    """Scripting output: one tab-separated line per row."""

    for row in rows:
        typer.echo("\t".join(_cell(item) for item in row))


def print_fields(title: str | None, fields: Sequence[tuple[str, Any]], *, indent: int = 2) -> None:
    """Aligned ``label: value`` block for show-style commands."""

    if title:
        typer.echo(title)
    if not fields:
        return
    width = max(len(label) for label, _ in fields) + 2
    pad = " " * indent
    for label, value in fields:
        typer.echo(f"{pad}{(label + ':').ljust(width)}{_cell(value)}")
