"""RosterDesk logging.

Usage:
    from rosterdesk.logutils import get_logger, with_context

    logger = get_logger(__name__)

    with with_context(operation="list_students"):
        logger.info("Refreshing roster", extra={"extra_data": {"count": 12}})
"""

from .config import Environment, LogConfig, detect_environment, get_config, reset_config, set_config
from .context import LogContext, clear_context, get_context, get_correlation_id, with_context
from .formatters import CompactFormatter, JSONFormatter, StandardFormatter
from .handlers import RichConsoleHandler, SafeRotatingFileHandler
from .logger import build_handlers, configure_logger, get_logger, reset_logging
from .masking import MASK, is_sensitive_key, mask_dict, mask_sensitive_string

__all__ = [
    "get_logger",
    "configure_logger",
    "build_handlers",
    "reset_logging",
    "with_context",
    "get_context",
    "clear_context",
    "get_correlation_id",
    "LogContext",
    "LogConfig",
    "Environment",
    "detect_environment",
    "get_config",
    "set_config",
    "reset_config",
    "JSONFormatter",
    "StandardFormatter",
    "CompactFormatter",
    "RichConsoleHandler",
    "SafeRotatingFileHandler",
    "MASK",
    "mask_sensitive_string",
    "mask_dict",
    "is_sensitive_key",
]
