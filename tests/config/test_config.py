"""
Tests for configuration management.

Tests config loading from:
1. Environment variables
2. YAML files
3. Combined (env overrides YAML)
"""

import pytest
import yaml

from tagging_rugby.config import Config, ExportConfig, PlayerConfig
from tagging_rugby.utils.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run every test without RUGBY_* variables or a stray .env file."""
    monkeypatch.chdir(tmp_path)
    for key in (
        "RUGBY_MPV_SOCKET",
        "RUGBY_MPV_BINARY",
        "RUGBY_MPV_CONNECT_RETRIES",
        "RUGBY_MPV_CONNECT_INTERVAL",
        "RUGBY_DB_PATH",
        "RUGBY_FFMPEG_BINARY",
        "RUGBY_EXPORT_STREAM_COPY",
        "RUGBY_EXPORT_PRESET",
        "RUGBY_TICK_INTERVAL",
        "RUGBY_RESULT_DURATION",
        "RUGBY_LOG_LEVEL",
        "RUGBY_LOG_TO_FILE",
        "RUGBY_LOG_DIR",
    ):
        monkeypatch.delenv(key, raising=False)


class TestConfigDefaults:
    """Test default configuration values."""

    def test_default_config_creation(self):
        config = Config()

        assert config.player.socket_path == "/tmp/tagging-rugby-mpv.sock"
        assert config.player.binary == "mpv"
        assert config.player.connect_retries == 50

        assert config.store.db_path.endswith("tagging-rugby-cli/data.db")

        assert config.export.pre_roll == 4.0
        assert config.export.post_roll == 10.0
        assert config.export.stream_copy is False

        assert config.ui.tick_interval == 0.1
        assert config.ui.result_display_duration == 3.0
        assert config.ui.overlay_proximity == 2.0

        assert config.logging.log_to_console is False
        assert config.logging.log_to_file is True

    def test_resolved_path_expands_user(self):
        config = Config()
        assert "~" not in str(config.store.resolved_path)

    def test_section_override(self):
        config = Config(export=ExportConfig(stream_copy=True))
        assert config.export.stream_copy is True
        assert config.export.binary == "ffmpeg"


class TestConfigFromEnv:
    """Test loading configuration from environment variables."""

    def test_from_env_basic(self, monkeypatch):
        monkeypatch.setenv("RUGBY_MPV_SOCKET", "/tmp/other.sock")
        monkeypatch.setenv("RUGBY_DB_PATH", "/tmp/rugby.db")
        monkeypatch.setenv("RUGBY_LOG_LEVEL", "DEBUG")

        config = Config.from_env()

        assert config.player.socket_path == "/tmp/other.sock"
        assert config.store.db_path == "/tmp/rugby.db"
        assert config.logging.level == "DEBUG"

    def test_type_conversion(self, monkeypatch):
        monkeypatch.setenv("RUGBY_MPV_CONNECT_RETRIES", "7")
        monkeypatch.setenv("RUGBY_TICK_INTERVAL", "0.25")
        monkeypatch.setenv("RUGBY_EXPORT_STREAM_COPY", "yes")
        monkeypatch.setenv("RUGBY_LOG_TO_FILE", "false")

        config = Config.from_env()

        assert config.player.connect_retries == 7
        assert config.ui.tick_interval == 0.25
        assert config.export.stream_copy is True
        assert config.logging.log_to_file is False

    def test_empty_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("RUGBY_MPV_BINARY", "")
        assert Config.from_env().player.binary == "mpv"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("RUGBY_FFMPEG_BINARY=/opt/ffmpeg\n")

        config = Config.from_env(env_file=env_file)

        assert config.export.binary == "/opt/ffmpeg"


class TestConfigFromYaml:
    """Test loading configuration from YAML files."""

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.dump(
                {
                    "player": {"binary": "/usr/local/bin/mpv"},
                    "ui": {"tick_interval": 0.5},
                }
            )
        )

        config = Config.from_yaml(path)

        assert config.player.binary == "/usr/local/bin/mpv"
        assert config.ui.tick_interval == 0.5
        assert config.player.socket_path == PlayerConfig().socket_path

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_yaml_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_yaml(path)
        assert exc_info.value.context["type"] == "list"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.from_yaml(path) == Config()


class TestConfigFromEnvOrYaml:
    """Test priority: env > YAML > defaults."""

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.dump({"player": {"binary": "yaml-mpv", "socket_path": "/tmp/yaml.sock"}})
        )
        monkeypatch.setenv("RUGBY_MPV_SOCKET", "/tmp/env.sock")

        config = Config.from_env_or_yaml(path)

        assert config.player.socket_path == "/tmp/env.sock"
        assert config.player.binary == "yaml-mpv"

    def test_yaml_only(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"export": {"pre_roll": 2.0}}))

        config = Config.from_env_or_yaml(path)

        assert config.export.pre_roll == 2.0

    def test_no_yaml(self):
        assert Config.from_env_or_yaml(None) == Config()
