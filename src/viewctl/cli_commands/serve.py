"""``viewctl serve`` — run the MCP server over stdio or HTTP."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
from rich.markup import escape

from viewctl.cli_commands._output import configure_logging, console


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="Transport to serve on (default: stdio).",
)
@click.option("--host", default=None, help="Bind address for the HTTP transport.")
@click.option("--port", type=int, default=None, help="Port for the HTTP transport.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML config file; command-line options take precedence.",
)
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging.")
@click.option("--ordered", is_flag=True, help="Answer stdio requests strictly in arrival order.")
@click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing.")
def serve(
    transport: str | None,
    host: str | None,
    port: int | None,
    config_path: str | None,
    debug: bool,
    ordered: bool,
    telemetry: bool,
) -> None:
    """Serve host-control tools until the input stream closes."""
    from viewctl.server.app import ViewControlServer
    from viewctl.server.config import ConfigLoader, build_config
    from viewctl.server.errors import ConfigError

    overrides = {
        "transport": transport,
        "host": host,
        "port": port,
        "debug": True if debug else None,
        "ordered_responses": True if ordered else None,
    }

    try:
        if config_path:
            config = ConfigLoader(Path(config_path)).load(**overrides)
        else:
            config = build_config(**overrides)
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if telemetry:
        config.telemetry.enabled = True

    configure_logging(debug=config.debug)

    if config.telemetry.enabled:
        from viewctl.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(
                service_name="viewctl",
                export_to_console=config.telemetry.otlp_endpoint is None,
                otlp_endpoint=config.telemetry.otlp_endpoint,
            )
        except ImportError as exc:
            console.print(f"[yellow]Telemetry disabled:[/yellow] {escape(str(exc))}")

    server = ViewControlServer(config)

    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        console.print("Interrupted")
    except Exception as exc:
        console.print(f"[red]Server error:[/red] {escape(str(exc))}")
        sys.exit(1)
