"""Structured logging with context propagation for plot jobs."""

import logging
import sys
import traceback
from typing import Dict, Optional
from contextvars import ContextVar
from datetime import datetime, timezone

# Correlation ids, set by LoggingContext and cell_scope
job_context: ContextVar[Optional[str]] = ContextVar('job_id', default=None)
node_context: ContextVar[Optional[str]] = ContextVar('node_id', default=None)
stage_context: ContextVar[Optional[str]] = ContextVar('stage', default=None)
cell_context: ContextVar[Optional[str]] = ContextVar('cell', default=None)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + 'Z'


def _format_traceback(exc_info) -> Optional[str]:
    if isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)
    elif not isinstance(exc_info, tuple):
        exc_info = sys.exc_info()
    if exc_info[0] is None:
        return None
    return ''.join(traceback.format_exception(*exc_info))


class StructuredLogger(logging.Logger):
    """Logger that stamps every record with the job, stage and cell it belongs to.

    Records carry three extra attributes read by the formatters:
    ``context`` (dict), ``performance`` (dict or None) and ``traceback``
    (str or None).
    """

    def _log(self, level, msg, args, exc_info=None, extra=None, stack_info=False, **kwargs):
        context = {
            'job_id': job_context.get(),
            'node_id': node_context.get(),
            'stage': stage_context.get(),
            'cell': cell_context.get(),
            'logger_name': self.name,
            'timestamp': _utc_timestamp(),
        }
        context = {k: v for k, v in context.items() if v is not None}

        extra = dict(extra) if isinstance(extra, dict) else {}
        performance = extra.pop('performance', None)
        context.update(extra.pop('context', None) or {})
        traceback_str = extra.pop('traceback', None)
        if not traceback_str and exc_info:
            traceback_str = _format_traceback(exc_info)

        extra.update(context=context, performance=performance, traceback=traceback_str)
        super()._log(level, msg, args, exc_info=False, extra=extra,
                     stack_info=stack_info, **kwargs)

    def log_performance(self, operation: str, duration: float, **metrics):
        """Log how long an operation took.

        A ``shape_count`` metric also yields a ``shapes_per_second`` rate.
        """
        performance = {
            'operation': operation,
            'duration_seconds': round(duration, 3),
            **metrics
        }
        if metrics.get('shape_count') and duration > 0:
            performance['shapes_per_second'] = round(metrics['shape_count'] / duration, 2)

        self.info(f"{operation} finished in {duration:.3f}s",
                  extra={'performance': performance})

    def log_error_with_context(self, error: Exception, operation: Optional[str] = None, **context):
        """Log an error with its type, the failing operation and its traceback."""
        error_context = {
            'error_type': type(error).__name__,
            'error_module': type(error).__module__,
            **context
        }
        if operation:
            error_context['operation'] = operation

        self.error(
            f"{type(error).__name__}: {error}",
            exc_info=error,
            extra={'context': error_context}
        )


_logger_cache: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Return the StructuredLogger registered under ``name``, creating it if needed."""
    if name in _logger_cache:
        return _logger_cache[name]

    original_class = logging.getLoggerClass()
    logging.setLoggerClass(StructuredLogger)
    try:
        logger = logging.getLogger(name)
        if isinstance(logger, StructuredLogger):
            _logger_cache[name] = logger
        return logger
    finally:
        logging.setLoggerClass(original_class)
