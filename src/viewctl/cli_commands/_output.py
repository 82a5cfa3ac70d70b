"""Shared CLI output: a stderr console and logging setup.

stdout belongs to the stdio protocol stream, so everything human-facing is
printed to stderr.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from viewctl.protocol.models import ToolDef

console = Console(stderr=True)


def configure_logging(*, debug: bool = False) -> None:
    """Route all ``viewctl`` logging to stderr through rich."""
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    root = logging.getLogger("viewctl")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.propagate = False


def print_tools_table(tools: list[ToolDef], *, out: Console | None = None) -> None:
    """Pretty-print tool definitions as a table."""
    table = Table(title="Registered Tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Parameters")
    table.add_column("Description")

    for tool in tools:
        params = ", ".join(tool.input_schema.get("properties", {})) or "-"
        table.add_row(tool.name, params, _truncate(tool.description))

    (out or console).print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
