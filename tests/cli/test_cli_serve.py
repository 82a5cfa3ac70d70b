"""Tests for ``viewctl serve`` CLI command."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from viewctl.cli import main


@pytest.fixture
def server_cls() -> Iterator[MagicMock]:
    with (
        patch("viewctl.server.app.ViewControlServer") as cls,
        patch("viewctl.cli_commands.serve.configure_logging") as _logging,
    ):
        cls.return_value.run = AsyncMock()
        yield cls


def _config(server_cls: MagicMock):
    return server_cls.call_args[0][0]


class TestServe:
    def test_stdio_by_default(self, server_cls: MagicMock) -> None:
        result = CliRunner().invoke(main, ["serve"])

        assert result.exit_code == 0, result.output
        assert _config(server_cls).transport == "stdio"
        server_cls.return_value.run.assert_awaited_once()

    def test_http_options(self, server_cls: MagicMock) -> None:
        result = CliRunner().invoke(
            main, ["serve", "--transport", "http", "--host", "0.0.0.0", "--port", "8123"]
        )

        assert result.exit_code == 0, result.output
        config = _config(server_cls)
        assert (config.transport, config.host, config.port) == ("http", "0.0.0.0", 8123)

    def test_flags(self, server_cls: MagicMock) -> None:
        result = CliRunner().invoke(main, ["serve", "--ordered", "-d"])

        assert result.exit_code == 0, result.output
        config = _config(server_cls)
        assert config.ordered_responses is True
        assert config.debug is True

    def test_config_file_with_override(self, server_cls: MagicMock, tmp_path: Path) -> None:
        path = tmp_path / "viewctl.yaml"
        path.write_text("transport: http\nport: 9000\n", encoding="utf-8")

        result = CliRunner().invoke(main, ["serve", "--config", str(path), "--port", "9001"])

        assert result.exit_code == 0, result.output
        config = _config(server_cls)
        assert config.transport == "http"
        assert config.port == 9001

    def test_invalid_config_file(self, server_cls: MagicMock, tmp_path: Path) -> None:
        path = tmp_path / "viewctl.yaml"
        path.write_text("- not\n- a mapping\n", encoding="utf-8")

        result = CliRunner().invoke(main, ["serve", "--config", str(path)])

        assert result.exit_code == 1
        assert "Config error" in result.output
        server_cls.assert_not_called()

    def test_invalid_port(self, server_cls: MagicMock) -> None:
        result = CliRunner().invoke(main, ["serve", "--port", "70000"])

        assert result.exit_code == 1
        assert "Config error" in result.output

    def test_server_error(self, server_cls: MagicMock) -> None:
        server_cls.return_value.run = AsyncMock(side_effect=RuntimeError("bind failed"))

        result = CliRunner().invoke(main, ["serve"])

        assert result.exit_code == 1
        assert "Server error" in result.output
        assert "bind failed" in result.output

    def test_telemetry_without_sdk(self, server_cls: MagicMock) -> None:
        with patch(
            "viewctl.utils.telemetry.configure_telemetry",
            side_effect=ImportError("opentelemetry-sdk is required"),
        ):
            result = CliRunner().invoke(main, ["serve", "--telemetry"])

        assert result.exit_code == 0, result.output
        assert "Telemetry disabled" in result.output
        assert _config(server_cls).telemetry.enabled is True
