"""
================================
Centralized logging configuration.
================================

Provides consistent logging setup across all drysql modules with:
- File and console output
- Configurable log levels (defaults come from core.config)
- Colored console output with emojis

Example:
    >>> from core.logger import get_logger, setup_logging
    >>>
    >>> # Setup logging at application start
    >>> setup_logging(log_level='DEBUG', log_file='drysql.log')
    >>>
    >>> # Get module logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Compiled UPDATE users")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from core.config import config


class ColoredFormatter(logging.Formatter):
    """Custom formatter with color support for console output.

    Attributes:
        COLORS: Dict mapping log levels to ANSI color codes
        EMOJI: Dict mapping log levels to emoji indicators
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    EMOJI = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️ ',
        'WARNING': '⚠️ ',
        'ERROR': '❌',
        'CRITICAL': '🔥'
    }

    def format(self, record):
        """Format log record with colors and emojis.

        The record is copied first so handlers sharing it (e.g. the file
        handler) still see the plain level name.
        """
        record = logging.makeLogRecord(record.__dict__)
        levelname = record.levelname
        record.emoji = self.EMOJI.get(levelname, '')
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"

        return super().format(record)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger instance for the specified module.

    Args:
        name: Logger name (typically __name__ of calling module)
        level: Optional logging level override (DEBUG/INFO/WARNING/ERROR/CRITICAL)

    Returns:
        Configured Logger instance
    """
    logger = logging.getLogger(name)

    if level:
        logger.setLevel(getattr(logging, level.upper()))

    return logger


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
    use_colors: Optional[bool] = None
) -> None:
    """Setup centralized logging configuration.

    Configures the root logger with console and/or file handlers.
    Arguments left as None fall back to core.config.

    Args:
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        log_file: Optional log file name (e.g., 'drysql.log')
        log_dir: Optional log directory path
        console_output: If True, output to console (stdout)
        use_colors: If True, use colored output for console

    Example:
        >>> setup_logging(log_level='DEBUG', log_file='drysql.log', log_dir='logs')
    """
    log_level = (log_level or config.logging.level).upper()
    log_file = log_file if log_file is not None else config.logging.log_file
    log_dir = log_dir if log_dir is not None else config.logging.log_dir
    use_colors = config.logging.use_colors if use_colors is None else use_colors

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))

    # Clear existing handlers
    root_logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level))

        if use_colors:
            console_formatter = ColoredFormatter(
                '%(emoji)s %(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        else:
            console_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / log_file, encoding='utf-8')
        file_handler.setLevel(getattr(logging, log_level))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(file_handler)


def get_module_logger(module_name: str) -> logging.Logger:
    """Get a logger for a specific module (alias of logging.getLogger)."""
    return logging.getLogger(module_name)

