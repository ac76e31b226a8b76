"""Utility modules for tagging-rugby."""

from tagging_rugby.utils.exceptions import (
    CommandError,
    ConfigurationError,
    DependencyError,
    EncoderMissingError,
    ExportError,
    MigrationError,
    NotConnectedError,
    NotFoundError,
    PlayerCommandError,
    PlayerError,
    ProtocolError,
    SocketNotFoundError,
    StoreError,
    TaggingRugbyError,
    TransportError,
    ValidationError,
)
from tagging_rugby.utils.logger import get_logger, setup_logging
from tagging_rugby.utils.timeutil import format_time, format_timestamp, parse_time_to_seconds

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Time helpers
    "format_time",
    "format_timestamp",
    "parse_time_to_seconds",
    # Exceptions
    "TaggingRugbyError",
    "PlayerError",
    "NotConnectedError",
    "SocketNotFoundError",
    "TransportError",
    "ProtocolError",
    "PlayerCommandError",
    "StoreError",
    "MigrationError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "DependencyError",
    "EncoderMissingError",
    "ExportError",
    "CommandError",
]
