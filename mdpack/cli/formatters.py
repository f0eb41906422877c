"""Output formatters for manifests and archive listings."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

FORMAT_NAMES = ("table", "jsonl", "json")


class OutputFormatter:
    """Base class for CLI output formatters."""

    name: str

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        """Render the provided rows to the target stream."""

        raise NotImplementedError


def _select(rows: Sequence[Mapping[str, object]], columns: Sequence[str] | None) -> list[dict[str, object]]:
    if not columns:
        return [dict(row) for row in rows]
    return [{column: row.get(column) for column in columns} for row in rows]


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render output as a Rich table."""

    name: str = "table"
    no_color: bool = False

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        resolved = list(columns) if columns else (list(rows[0].keys()) if rows else [])

        table = Table(box=SIMPLE, show_lines=False)
        for column in resolved:
            table.add_column(column, header_style="" if self.no_color else "bold")
        for row in rows:
            table.add_row(*(self._format_cell(row.get(column)) for column in resolved))

        if resolved:
            console.print(table)
        if not rows:
            console.print("No archives produced.")

    @staticmethod
    def _format_cell(value: object) -> str:
        if value is None:
            return "-"
        if isinstance(value, datetime):
            return value.strftime("%Y-%m-%d %H:%M:%S")
        return str(value)


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """Render output as JSON Lines."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        for row in _select(rows, columns):
            json.dump(row, stream, ensure_ascii=False, default=str)
            stream.write("\n")
        stream.flush()


@dataclass(slots=True)
class JSONFormatter(OutputFormatter):
    """Render output as a single JSON array, the shape published downstream."""

    name: str = "json"

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        json.dump(_select(rows, columns), stream, ensure_ascii=False, default=str, indent=2)
        stream.write("\n")
        stream.flush()


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    if normalized == "json":
        return JSONFormatter()
    msg = f"Unsupported format '{name}'. Available formats: {', '.join(FORMAT_NAMES)}."
    raise ValueError(msg)


__all__ = ["FORMAT_NAMES", "JSONFormatter", "JSONLFormatter", "OutputFormatter", "TableFormatter", "create_formatter"]
