"""``viewctl tools`` — list the tool catalogue without touching any device."""

from __future__ import annotations

import json

import click
from rich.console import Console

from viewctl.cli_commands._output import print_tools_table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list payload as JSON.")
def tools(as_json: bool) -> None:
    """List the tools a client discovers via ``tools/list``."""
    from viewctl.server.app import ViewControlServer

    server = ViewControlServer()
    tool_defs = server.registry.list_tools()

    if as_json:
        click.echo(json.dumps({"tools": [t.to_wire() for t in tool_defs]}, indent=2))
        return

    print_tools_table(tool_defs, out=Console())
