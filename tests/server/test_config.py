"""Tests for ServerConfig and the YAML ConfigLoader."""

from pathlib import Path

import pytest

from viewctl.server.config import (
    LATEST_PROTOCOL_VERSION,
    ConfigLoader,
    ServerConfig,
    build_config,
)
from viewctl.server.errors import ConfigError


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "viewctl.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults() -> None:
    config = ServerConfig()
    assert config.transport == "stdio"
    assert config.host == "127.0.0.1"
    assert config.port == 3000
    assert config.protocol_version == LATEST_PROTOCOL_VERSION
    assert config.ordered_responses is False
    assert config.telemetry.enabled is False


class TestBuildConfig:
    def test_overrides_win(self) -> None:
        config = build_config({"port": 4000, "transport": "stdio"}, transport="http")
        assert config.transport == "http"
        assert config.port == 4000

    def test_none_overrides_ignored(self) -> None:
        config = build_config({"port": 4000}, port=None, host=None)
        assert config.port == 4000
        assert config.host == "127.0.0.1"

    @pytest.mark.parametrize("data", [{"port": 70000}, {"port": -1}, {"transport": "websocket"}])
    def test_invalid_values(self, data: dict) -> None:
        with pytest.raises(ConfigError):
            build_config(data)


class TestConfigLoader:
    def test_load(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "transport: http\nport: 8080\nordered_responses: true\ntelemetry:\n  enabled: true\n",
        )
        config = ConfigLoader(path).load()
        assert config.transport == "http"
        assert config.port == 8080
        assert config.ordered_responses is True
        assert config.telemetry.enabled is True

    def test_env_interpolation(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VIEWCTL_TEST_HOST", "0.0.0.0")
        path = _write(tmp_path, "host: ${VIEWCTL_TEST_HOST}\n")
        assert ConfigLoader(path).load().host == "0.0.0.0"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        assert ConfigLoader(_write(tmp_path, "")).load() == ServerConfig()

    def test_overrides(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "port: 8080\n")
        assert ConfigLoader(path).load(port=9090).port == 9090

    def test_non_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader(_write(tmp_path, "- a\n- b\n")).load()

    def test_bad_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="YAML parse error"):
            ConfigLoader(_write(tmp_path, "port: [unclosed\n")).load()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            ConfigLoader(tmp_path / "missing.yaml").load()
