"""Structured logging infrastructure for plot job monitoring."""

from .structured_logger import (
    StructuredLogger, get_logger, job_context, node_context, stage_context, cell_context
)
from .context import LoggingContext, cell_scope
from .decorators import log_operation, log_stage
from .setup import setup_logging

__all__ = [
    'StructuredLogger',
    'get_logger',
    'job_context',
    'node_context',
    'stage_context',
    'cell_context',
    'LoggingContext',
    'cell_scope',
    'log_operation',
    'log_stage',
    'setup_logging',
]
