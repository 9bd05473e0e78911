"""Logger factory for RosterDesk."""

from __future__ import annotations

import logging
import sys

from .config import LogConfig, get_config
from .formatters import CompactFormatter, JSONFormatter, StandardFormatter
from .handlers import RichConsoleHandler, SafeRotatingFileHandler

_configured: set[str] = set()


def get_logger(name: str, config: LogConfig | None = None) -> logging.Logger:
    """Return a logger with RosterDesk handlers attached.

    Args:
        name: Logger name, usually ``__name__``
        config: Configuration to apply instead of the global one

    Returns:
        Configured Logger instance
    """
    logger = logging.getLogger(name)
    if name not in _configured:
        configure_logger(logger, config or get_config())
        _configured.add(name)
    return logger


def configure_logger(logger: logging.Logger, config: LogConfig) -> None:
    """Replace a logger's handlers with ones built from ``config``."""
    logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    for handler in build_handlers(config):
        logger.addHandler(handler)


def build_handlers(config: LogConfig) -> list[logging.Handler]:
    """Create the console handler and, if a log file is set, a file handler."""
    handlers: list[logging.Handler] = []

    console: logging.Handler
    if config.json_format:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(JSONFormatter(mask_sensitive=config.mask_sensitive))
    elif config.use_rich:
        console = RichConsoleHandler()
        console.setFormatter(CompactFormatter(mask_sensitive=config.mask_sensitive))
    else:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(StandardFormatter(mask_sensitive=config.mask_sensitive))
    handlers.append(console)

    if config.log_file:
        file_handler = SafeRotatingFileHandler(
            config.log_file,
            max_bytes=config.max_file_size,
            backup_count=config.backup_count,
        )
        file_handler.setFormatter(JSONFormatter(mask_sensitive=config.mask_sensitive))
        handlers.append(file_handler)

    return handlers


def reset_logging() -> None:
    """Detach handlers from every logger created through ``get_logger``."""
    for name in _configured:
        logging.getLogger(name).handlers.clear()
    _configured.clear()
