"""Decorators for automatic logging and error capture."""

import functools
import time
from typing import Any, Callable, Optional, TypeVar

from .structured_logger import get_logger, node_context, stage_context

F = TypeVar('F', bound=Callable[..., Any])


def log_operation(operation_name: Optional[str] = None, log_performance: bool = True):
    """Decorator to log operation execution and capture errors.

    Example:
        @log_operation("dataset_scan")
        def compute_mbr(source):
            ...
    """
    def decorator(func: F) -> F:
        name = operation_name or func.__name__
        logger = get_logger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start_time = time.time()
            try:
                logger.debug(f"Starting {name}", extra={'context': {'operation': name}})
                result = func(*args, **kwargs)
                if log_performance:
                    logger.log_performance(name, time.time() - start_time, status='success')
                return result
            except Exception as e:
                logger.error(
                    f"Failed {name}: {e}",
                    exc_info=True,
                    extra={
                        'context': {'operation': name},
                        'performance': {
                            'duration_seconds': round(time.time() - start_time, 3),
                            'status': 'failed',
                            'error_type': type(e).__name__
                        }
                    }
                )
                raise

        return wrapper  # type: ignore
    return decorator


def log_stage(stage_name: str):
    """Decorator for pipeline stage ``execute(self, context)`` methods.

    Uses ``context.logging_context`` when the pipeline context has one,
    otherwise sets the stage ContextVars directly.
    """
    def decorator(func: F) -> F:
        logger = get_logger(func.__module__)

        @functools.wraps(func)
        def wrapper(self, context, *args, **kwargs) -> Any:
            logging_context = getattr(context, 'logging_context', None)
            if logging_context is not None:
                with logging_context.stage(stage_name):
                    return func(self, context, *args, **kwargs)

            start_time = time.time()
            stage_token = stage_context.set(stage_name)
            current_node = node_context.get()
            node_token = node_context.set(
                f"{current_node}/{stage_name}" if current_node else f"stage/{stage_name}"
            )
            try:
                logger.info(f"Stage {stage_name} started")
                result = func(self, context, *args, **kwargs)
                logger.log_performance(f"stage_{stage_name}", time.time() - start_time,
                                       status='completed')
                return result
            except Exception:
                logger.error(
                    f"Stage failed: {stage_name}",
                    exc_info=True,
                    extra={
                        'performance': {
                            'duration_seconds': round(time.time() - start_time, 3),
                            'status': 'failed'
                        }
                    }
                )
                raise
            finally:
                node_context.reset(node_token)
                stage_context.reset(stage_token)

        return wrapper  # type: ignore
    return decorator
