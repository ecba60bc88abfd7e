"""Centralized logging configuration for tiercache.

Sets up standard Python logging with appropriate levels, formatters,
and handlers (console, optional file). The library itself only creates
module loggers; this is called by the CLI or by applications that want
the same output format.
"""

import logging
import sys
from typing import Optional

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = None


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = DEFAULT_LOG_FILE
) -> None:
    """Configures the root logger.

    Args:
        log_level: The minimum logging level (e.g., logging.DEBUG, logging.INFO).
        log_format: The format string for log messages.
        log_file: Optional path to a file for logging output.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers attached to the root logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logging.info(f"Logging to file: {log_file}")
        except OSError as e:
            logging.error(f"Failed to set up file logging to {log_file}: {e}", exc_info=True)

    logging.debug(f"Logging configured. Level={logging.getLevelName(log_level)}")


def level_from_name(name: Optional[str], default: int = DEFAULT_LOG_LEVEL) -> int:
    """Turns 'debug', 'INFO', ... into a logging level, falling back to ``default``."""
    if not name:
        return default
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default
