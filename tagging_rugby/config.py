"""
Configuration for tagging-rugby.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)

Nothing here is required at runtime; every value has a default.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from tagging_rugby.utils.exceptions import ConfigurationError

DATA_DIR = "~/.local/share/tagging-rugby-cli"


def _read_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML config document; an empty file is an empty mapping."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "config file must contain a mapping",
            {"path": str(path), "type": type(data).__name__},
        )
    return data


class PlayerConfig(BaseModel):
    """mpv player configuration."""

    socket_path: str = "/tmp/tagging-rugby-mpv.sock"
    binary: str = "mpv"
    connect_retries: int = 50
    connect_interval: float = 0.1


class StoreConfig(BaseModel):
    """SQLite store configuration."""

    db_path: str = f"{DATA_DIR}/data.db"

    @property
    def resolved_path(self) -> Path:
        """Database path with the user directory expanded."""
        return Path(self.db_path).expanduser()


class ExportConfig(BaseModel):
    """Clip export configuration."""

    binary: str = "ffmpeg"
    stream_copy: bool = False
    pre_roll: float = 4.0
    post_roll: float = 10.0
    preset: str = "fast"
    # Used when the player cannot report a duration
    fallback_duration: float = 86400.0


class UIConfig(BaseModel):
    """Event loop and display configuration."""

    tick_interval: float = 0.1
    result_display_duration: float = 3.0
    overlay_proximity: float = 2.0
    default_step_size: float = 1.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_console: bool = False
    log_to_file: bool = True
    log_dir: str = f"{DATA_DIR}/logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str | None = "zip"
    serialize: bool = False


class Config(BaseModel):
    """Main configuration."""

    player: PlayerConfig = Field(default_factory=PlayerConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            RUGBY_MPV_SOCKET: IPC socket path
            RUGBY_MPV_BINARY: mpv executable
            RUGBY_MPV_CONNECT_RETRIES: connection attempts after launch
            RUGBY_MPV_CONNECT_INTERVAL: seconds between attempts
            RUGBY_DB_PATH: SQLite database file
            RUGBY_FFMPEG_BINARY: ffmpeg executable
            RUGBY_EXPORT_STREAM_COPY: use -c copy instead of re-encoding
            RUGBY_EXPORT_PRESET: x264 preset
            RUGBY_TICK_INTERVAL: player polling interval in seconds
            RUGBY_RESULT_DURATION: seconds a result banner stays visible
            RUGBY_LOG_LEVEL: log level
            RUGBY_LOG_TO_FILE: enable file logging
            RUGBY_LOG_DIR: log directory
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            if value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        return cls(
            player=PlayerConfig(
                socket_path=get_env("RUGBY_MPV_SOCKET", "/tmp/tagging-rugby-mpv.sock"),
                binary=get_env("RUGBY_MPV_BINARY", "mpv"),
                connect_retries=get_env("RUGBY_MPV_CONNECT_RETRIES", 50),
                connect_interval=get_env("RUGBY_MPV_CONNECT_INTERVAL", 0.1),
            ),
            store=StoreConfig(
                db_path=get_env("RUGBY_DB_PATH", f"{DATA_DIR}/data.db"),
            ),
            export=ExportConfig(
                binary=get_env("RUGBY_FFMPEG_BINARY", "ffmpeg"),
                stream_copy=get_env("RUGBY_EXPORT_STREAM_COPY", False),
                preset=get_env("RUGBY_EXPORT_PRESET", "fast"),
            ),
            ui=UIConfig(
                tick_interval=get_env("RUGBY_TICK_INTERVAL", 0.1),
                result_display_duration=get_env("RUGBY_RESULT_DURATION", 3.0),
            ),
            logging=LoggingConfig(
                level=get_env("RUGBY_LOG_LEVEL", "INFO"),
                log_to_file=get_env("RUGBY_LOG_TO_FILE", True),
                log_dir=get_env("RUGBY_LOG_DIR", f"{DATA_DIR}/logs"),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
            ConfigurationError: If the document is not a mapping
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        return cls(**_read_yaml(yaml_path))

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            config_dict = _read_yaml(yaml_path)
        else:
            config_dict = {}

        env_config = cls.from_env(env_file)

        # Only sections that differ from defaults override the YAML
        final_dict = {**config_dict}
        default = cls()
        for section in ("player", "store", "export", "ui", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                merged = {**config_dict.get(section, {})}
                default_values = getattr(default, section).model_dump()
                for key, value in env_section.model_dump().items():
                    if value != default_values[key]:
                        merged[key] = value
                final_dict[section] = merged

        return cls(**final_dict)


# Default config instance
default_config = Config()
