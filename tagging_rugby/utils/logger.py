"""
Loguru sinks for tagging-rugby.

The TUI owns the terminal while a video is open, so records go to a
rotating file by default and a stderr sink is only added on request
(the headless export and stats commands). Every logger handed out by
get_logger() carries the dotted module name in ``extra["module"]``;
the formats print that instead of loguru's own ``name`` field, which
is the same for all records logged through the bound instance.
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from tagging_rugby.config import LoggingConfig

LOG_FILE_PATTERN = "tagging-rugby_{time:YYYY-MM-DD}.log"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[module]}:{function}:{line} - {message}"
)

# Records logged through the bare loguru logger have no module binding
logger.configure(extra={"module": "-"})


def _own_records(record: dict) -> bool:
    """Keep records logged through get_logger() by this package."""
    return record["extra"].get("module", "-").startswith("tagging_rugby")


def setup_logging(config: "LoggingConfig", console: bool | None = None) -> Path | None:
    """
    Replace loguru's default sink with the configured ones.

    Args:
        config: Logging section of the application config
        console: Force the stderr sink on or off; config.log_to_console when None

    Returns:
        Directory receiving log files, or None when file logging is off
    """
    logger.remove()
    logger.configure(extra={"module": "-"})

    if config.log_to_console if console is None else console:
        logger.add(
            sys.stderr,
            level=config.level,
            format=CONSOLE_FORMAT,
            colorize=True,
            filter=_own_records,
        )

    if not config.log_to_file:
        return None

    log_dir = Path(config.log_dir).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_dir / LOG_FILE_PATTERN,
        level=config.level,
        format=FILE_FORMAT,
        rotation=config.file_rotation,
        retention=config.file_retention,
        compression=config.compression,
        serialize=config.serialize,
        filter=_own_records,
        # Written from the export producer task as well as the UI loop
        enqueue=True,
    )
    return log_dir


def get_logger(name: str):
    """Get a logger instance for a module."""
    return logger.bind(module=name)
