"""viewctl CLI entrypoint."""

from __future__ import annotations

import click

from viewctl import __version__


@click.group()
@click.version_option(version=__version__, prog_name="viewctl")
def main() -> None:
    """viewctl — host-control MCP server."""


# Register subcommands
from viewctl.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
