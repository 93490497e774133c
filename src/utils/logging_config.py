"""
Logging Configuration

Provides centralized logging setup for consistent log formatting
and configuration across the application.

While the live feedback display owns the terminal, log lines written to
stdout would tear the frame, so the CLI logs to a rotating file and turns
the console handler off.

Usage:
    from utils.logging_config import setup_logging
    setup_logging(level=logging.DEBUG, log_file=default_log_file(), console=False)
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional
import threading

# Thread-safe initialization
_initialized = False
_lock = threading.Lock()

# Default format
DEFAULT_FORMAT = "%(asctime)s | %(name)s | %(threadName)s | %(levelname)s | %(message)s"
SIMPLE_FORMAT = "%(levelname)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s | %(name)s:%(lineno)d | %(threadName)s | %(levelname)s | %(message)s"

# Color codes for terminal output
LEVEL_COLORS = {
    'DEBUG': '\033[36m',     # Cyan
    'INFO': '\033[32m',      # Green
    'WARNING': '\033[33m',   # Yellow
    'ERROR': '\033[31m',     # Red
    'CRITICAL': '\033[35m',  # Magenta
}
RESET = '\033[0m'


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to log levels for terminal output."""

    def __init__(self, fmt=None, datefmt=None, use_colors=True, stream=None):
        super().__init__(fmt, datefmt)
        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record):
        if self.use_colors and record.levelname in LEVEL_COLORS:
            # Work on a copy so other handlers see the plain level name
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{LEVEL_COLORS[record.levelname]}{record.levelname}{RESET}"
        return super().format(record)


def default_log_file() -> Path:
    """Per-user log file location (XDG cache dir)."""
    cache_home = os.environ.get('XDG_CACHE_HOME') or str(Path.home() / '.cache')
    return Path(cache_home) / 'diagfeedback' / 'diagfeedback.log'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_format: str = DEFAULT_FORMAT,
    use_colors: bool = True,
    console: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    force: bool = False,
) -> None:
    """
    Configure the root logger with consistent settings.

    Args:
        level: Logging level (default INFO)
        log_file: Optional file path for logging
        log_format: Log message format string
        use_colors: Enable colored output in terminal
        console: Attach a stderr handler
        max_bytes: Max log file size before rotation
        backup_count: Number of backup files to keep
        force: Reconfigure even if logging was already set up
    """
    global _initialized

    with _lock:
        if _initialized and not force:
            return

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Remove existing handlers
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        if console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            if use_colors:
                console_handler.setFormatter(ColoredFormatter(log_format, stream=sys.stderr))
            else:
                console_handler.setFormatter(logging.Formatter(log_format))
            root_logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(log_format))
            root_logger.addHandler(file_handler)

        if not root_logger.handlers:
            root_logger.addHandler(logging.NullHandler())

        _initialized = True


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance with the given name.

    This ensures logging is configured before returning the logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured Logger instance
    """
    if not _initialized:
        setup_logging()

    return logging.getLogger(name)


def set_level(level: int, logger_name: str = None) -> None:
    """
    Set logging level for a specific logger or root logger.

    Args:
        level: Logging level
        logger_name: Optional specific logger name
    """
    if logger_name:
        logging.getLogger(logger_name).setLevel(level)
    else:
        logging.getLogger().setLevel(level)


def enable_debug(logger_name: str = None) -> None:
    """Enable debug logging"""
    set_level(logging.DEBUG, logger_name)
