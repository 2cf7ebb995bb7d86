from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .results import CommandResult

MAX_TABLE_COLUMNS = 8
MAX_CELL_WIDTH = 60


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    mapping = {
        "usage_error": "Usage error",
        "config_error": "Configuration error",
        "unauthorized": "Not signed in",
        "rate_limited": "Rate limited",
        "server_error": "Server error",
        "network_error": "Network error",
        "decoding_failed": "Unreadable response",
        "invalid_url": "Invalid URL",
        "invalid_response": "Invalid response",
        "http_error": "Request failed",
        "internal_error": "Internal error",
    }
    return mapping.get((error_type or "").strip(), "Error")


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list):
        text = ", ".join(_format_cell(v) for v in value)
    elif isinstance(value, dict):
        text = json.dumps(value, ensure_ascii=False)
    else:
        text = str(value)
    if len(text) > MAX_CELL_WIDTH:
        return text[: MAX_CELL_WIDTH - 1] + "…"
    return text


def _columns_for(rows: list[dict[str, Any]], *, verbosity: int) -> list[str]:
    columns: list[str] = []
    for row in rows:
        for key, value in row.items():
            if key not in columns and value not in (None, [], {}):
                columns.append(key)
    if "id" in columns:
        columns.remove("id")
        columns.insert(0, "id")
    if verbosity < 1:
        columns = columns[:MAX_TABLE_COLUMNS]
    return columns


def _table_from_rows(rows: list[dict[str, Any]], *, verbosity: int) -> Table:
    table = Table(show_header=True, header_style="bold")
    if not rows:
        table.add_column("result")
        table.add_row("No results")
        return table
    columns = _columns_for(rows, verbosity=verbosity)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*[_format_cell(row.get(col)) for col in columns])
    return table


def _kv_table(obj: dict[str, Any]) -> Table:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("field", style="bold")
    table.add_column("value")
    for key, value in obj.items():
        if value in (None, [], {}):
            continue
        table.add_row(key, _format_cell(value))
    return table


def _renderable_for(data: Any, *, verbosity: int) -> Any:
    if data is None:
        return None
    if isinstance(data, list):
        if all(isinstance(row, dict) for row in data):
            return _table_from_rows(data, verbosity=verbosity)
        return Text("\n".join(_format_cell(v) for v in data))
    if isinstance(data, dict):
        return _kv_table(data)
    return Text(str(data))


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    if not result.ok:
        if result.error is not None:
            stderr.print(f"{_error_title(result.error.type)}: {result.error.message}")
            if settings.verbosity >= 1 and result.error.details and not settings.quiet:
                stderr.print(json.dumps(result.error.details, ensure_ascii=False, indent=2))
        else:
            stderr.print("Error")
        return 0

    if result.command == "version" and isinstance(result.data, dict):
        renderable: Any = Text(str(result.data.get("version", "")), style="bold")
    else:
        renderable = _renderable_for(result.data, verbosity=settings.verbosity)
    if renderable is not None:
        stdout.print(renderable)

    pagination = result.meta.pagination
    if pagination and not settings.quiet:
        stderr.print(
            f"{pagination.get('count', 0)} results"
            + (f", {pagination['remaining']} remaining" if pagination.get("remaining") else "")
        )
    for warning in result.warnings:
        if not settings.quiet:
            stderr.print(f"Warning: {warning}")
    return 0


__all__ = ["RenderSettings", "render_result"]
