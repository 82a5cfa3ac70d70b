"""Server configuration — pydantic models and the YAML loader behind ``--config``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from viewctl import __version__
from viewctl.server.errors import ConfigError

LATEST_PROTOCOL_VERSION = "2024-11-05"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerConfig(BaseModel):
    """Everything needed to assemble and run a server instance."""

    name: str = "View Control MCP Server"
    version: str = __version__
    debug: bool = False
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=0, le=65535)
    ordered_responses: bool = Field(
        default=False,
        description="Answer stdio requests strictly in arrival order.",
    )
    protocol_version: str = LATEST_PROTOCOL_VERSION
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)


class ConfigLoader:
    """Load and validate a YAML config file into a :class:`ServerConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self, **overrides: Any) -> ServerConfig:
        """Read YAML, interpolate env vars, apply *overrides* and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  Overrides whose
        value is ``None`` are ignored.

        Raises:
            ConfigError: On read errors, YAML parse errors or validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config YAML must be a mapping")

        return build_config(data, **overrides)


def build_config(data: dict[str, Any] | None = None, **overrides: Any) -> ServerConfig:
    """Validate *data* merged with the non-``None`` *overrides*."""
    merged = dict(data or {})
    merged.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ServerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
