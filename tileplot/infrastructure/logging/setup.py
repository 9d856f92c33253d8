"""Setup and configuration for the structured logging system."""

import logging
from pathlib import Path
from typing import Optional, Union

from .structured_logger import get_logger
from .handlers import ConsoleHandler, FileHandler


def _reset_root(level: int) -> logging.Logger:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    return root_logger


def setup_logging(settings=None,
                  log_file: Optional[Union[str, Path]] = None,
                  console: Optional[bool] = None,
                  log_level: Optional[str] = None):
    """Configure console and rotating JSON file logging.

    Args:
        settings: Config instance (or anything with ``get(dot.key)``)
        log_file: Log file path; falls back to ``logging.file`` in settings
        console: Whether to log to stderr; falls back to ``logging.console``
        log_level: Minimum level; falls back to ``logging.level``
    """
    def setting(key, default):
        return settings.get(key, default) if settings is not None else default

    log_level = log_level or setting('logging.level', 'INFO')
    console = setting('logging.console', True) if console is None else console
    log_file = log_file or setting('logging.file', None)

    level = getattr(logging, str(log_level).upper(), logging.INFO)
    root_logger = _reset_root(level)

    if console:
        console_handler = ConsoleHandler(show_context=True)
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

    if log_file:
        file_handler = FileHandler(
            filename=str(log_file),
            max_bytes=setting('logging.max_file_size', 50 * 1024 * 1024),
            backup_count=setting('logging.backup_count', 3),
            use_json=True
        )
        root_logger.addHandler(file_handler)
        # Files capture everything regardless of console level
        root_logger.setLevel(logging.DEBUG)

    get_logger(__name__).debug(
        "Structured logging system initialized",
        extra={
            'context': {
                'log_level': log_level,
                'handlers': {'console': console, 'file': str(log_file) if log_file else None}
            }
        }
    )

