"""
Logging helpers for the shape library.
Supports plain or structured (JSON) output, console and rotating file
handlers, and log capture for tests and diagnostics.
"""

import os
import sys
import json
import logging
import traceback
from datetime import datetime
from typing import Dict, Any, List, Optional
from logging.handlers import RotatingFileHandler

# Constants
DEFAULT_LOG_LEVEL = logging.INFO
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Attributes every LogRecord carries; anything else was passed via `extra`
_RESERVED_ATTRS = frozenset((
    'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
    'funcName', 'id', 'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'msg', 'name', 'pathname', 'process', 'processName',
    'relativeCreated', 'stack_info', 'thread', 'threadName', 'taskName',
))


class JsonFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'name': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'line': record.lineno,
        }

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        # Fields passed through `extra`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def _build_handlers(
    log_level: int,
    log_file: Optional[str],
    console: bool
) -> List[logging.Handler]:
    handlers = []

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        handlers.append(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT
        )
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    return handlers


def setup_logging(
    app_name: str = 'patchwork_shapes',
    log_dir: Optional[str] = None,
    log_level: int = DEFAULT_LOG_LEVEL,
    use_json: bool = False,
    log_to_console: bool = True,
    log_to_file: bool = False
) -> logging.Logger:
    """
    Configure a named application logger.

    Args:
        app_name: Application name for logger
        log_dir: Directory to store log files (defaults to $LOG_DIR or ./logs)
        log_level: Log level
        use_json: Use JSON format for logs
        log_to_console: Log to stdout
        log_to_file: Log to a rotating file named after the application

    Returns:
        Configured logger
    """
    log_file = None
    if log_to_file:
        if log_dir is None:
            log_dir = os.environ.get('LOG_DIR', os.path.join(os.getcwd(), 'logs'))
        log_file = os.path.join(log_dir, f"{app_name}.log")

    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.handlers = []  # Remove existing handlers

    formatter = JsonFormatter() if use_json else logging.Formatter(LOG_FORMAT)
    for handler in _build_handlers(log_level, log_file, log_to_console):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def setup_logger(
    level: str = None,
    log_file: Optional[str] = None,
    console: bool = True,
    format_str: Optional[str] = None
) -> None:
    """
    Configure the root logger for the application.

    Args:
        level: Logging level name, e.g. "DEBUG" (defaults to $LOG_LEVEL or INFO)
        log_file: Optional file to log to
        console: Whether to log to console
        format_str: Optional custom format string
    """
    level = level or os.environ.get('LOG_LEVEL')
    level_value = getattr(logging, level.upper(), logging.INFO) if level else logging.INFO
    formatter = logging.Formatter(format_str or LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in _build_handlers(level_value, log_file, console):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class LogCapture:
    """Context manager to capture logs for testing or analysis."""

    def __init__(self, logger_name: str = None, level: int = logging.DEBUG):
        self.logger_name = logger_name
        self.level = level
        self.handler = None
        self.records: List[logging.LogRecord] = []
        self._previous_level = None

    @property
    def messages(self) -> List[str]:
        """Formatted messages captured so far."""
        return [record.getMessage() for record in self.records]

    def __enter__(self):
        records = self.records

        class CaptureHandler(logging.Handler):
            def emit(self, record):
                records.append(record)

        self.handler = CaptureHandler()
        self.handler.setLevel(self.level)
        self.handler.setFormatter(logging.Formatter(LOG_FORMAT))

        logger = logging.getLogger(self.logger_name)
        self._previous_level = logger.level
        if logger.getEffectiveLevel() > self.level:
            logger.setLevel(self.level)
        logger.addHandler(self.handler)

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.handler:
            logger = logging.getLogger(self.logger_name)
            logger.removeHandler(self.handler)
            logger.setLevel(self._previous_level)
            self.handler = None


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    level: int = logging.ERROR,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an exception with context.

    Args:
        logger: Logger to use
        exc: Exception to log
        level: Log level
        context: Additional context to log
    """
    message = f"Exception: {type(exc).__name__}: {str(exc)}"

    if context:
        context_str = ', '.join(f"{k}={v}" for k, v in context.items())
        message += f" [Context: {context_str}]"

    logger.log(level, message, exc_info=exc)
