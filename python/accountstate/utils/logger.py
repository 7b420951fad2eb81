"""
Logging setup for accountstate.

Modules log through `logging.getLogger(__name__)`; applications call
configure_logging() (or setup_logger() directly) once at startup.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

if TYPE_CHECKING:
    from ..config.loader import LoggingConfig

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    return handlers


def setup_logger(
    name: str,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Set up a logger with a stdout handler and an optional file handler.

    Existing handlers on the logger are replaced, so calling this twice does
    not duplicate output.

    Args:
        name: Logger name.
        level: Logging level (int or level name such as "DEBUG").
        log_file: Optional log file path; parent directories are created.
        format_string: Optional format string (defaults to DEFAULT_FORMAT).

    Returns:
        Configured logger instance.
    """
    if isinstance(level, str):
        level_name = level
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level_name}")

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    for handler in _build_handlers(log_file):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(config: 'LoggingConfig', name: str = "accountstate") -> logging.Logger:
    """Configure the package logger from a LoggingConfig."""
    return setup_logger(name, config.level, config.log_file, config.format)
