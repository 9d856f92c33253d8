"""Logging context management for plot job correlation."""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional
import uuid
import time
from datetime import datetime

from .structured_logger import (
    job_context, node_context, stage_context, cell_context, get_logger
)


class LoggingContext:
    """Job -> stage -> operation scopes for one plot job.

    Each scope pushes a node id such as ``pipeline_plot/render/cell_pool``
    onto ``node_context`` so every record logged inside it can be traced
    back. Stage durations are kept for the job summary.
    """

    def __init__(self, job_id: Optional[str] = None):
        self.job_id = job_id or uuid.uuid4().hex[:12]
        self.node_stack: List[str] = []
        self.stage_stack: List[str] = []
        self.timings: Dict[str, Dict[str, Any]] = {}
        self.logger = get_logger(self.__class__.__name__)

    @contextmanager
    def _node(self, name: str):
        parent = self.node_stack[-1] if self.node_stack else "unknown"
        node_id = f"{parent}/{name}"
        token = node_context.set(node_id)
        self.node_stack.append(node_id)
        try:
            yield node_id
        finally:
            self.node_stack.pop()
            node_context.reset(token)

    @contextmanager
    def pipeline(self, name: str, **metadata):
        """Scope of a whole plot job.

        Example:
            with ctx.pipeline('plot', input='points.csv'):
                ...
        """
        node_id = f"pipeline_{name}"
        job_token = job_context.set(self.job_id)
        node_token = node_context.set(node_id)
        self.node_stack.append(node_id)

        start_time = time.time()
        self.logger.info(f"Job {self.job_id} started: {name}",
                         extra={'context': {'pipeline_name': name, **metadata}})
        status = 'failed'
        try:
            yield self
            status = 'completed'
        finally:
            self.logger.log_performance(node_id, time.time() - start_time, status=status)
            self.node_stack.pop()
            node_context.reset(node_token)
            job_context.reset(job_token)

    @contextmanager
    def stage(self, name: str, **metadata):
        """Scope of one pipeline stage; its duration and outcome land in ``timings``."""
        stage_token = stage_context.set(name)
        self.stage_stack.append(name)
        start_time = time.time()
        status = 'failed'
        try:
            with self._node(name):
                self.logger.info(f"Stage {name} started",
                                 extra={'context': {'stage_name': name, **metadata}})
                try:
                    yield self
                except Exception as e:
                    self.logger.log_error_with_context(e, operation=f"stage_{name}")
                    raise
                status = 'completed'
        finally:
            duration = time.time() - start_time
            self.timings[name] = {
                'duration': duration,
                'status': status,
                'timestamp': datetime.now().isoformat()
            }
            self.logger.log_performance(f"stage_{name}", duration, status=status)
            self.stage_stack.pop()
            stage_context.reset(stage_token)

    @contextmanager
    def operation(self, name: str, **metadata):
        """Scope of one timed step inside a stage, such as a render pass."""
        start_time = time.time()
        status = 'failed'
        with self._node(name):
            self.logger.debug(f"{name} started", extra={'context': metadata})
            try:
                yield self
                status = 'success'
            except Exception as e:
                self.logger.log_error_with_context(e, operation=name, **metadata)
                raise
            finally:
                self.logger.log_performance(name, time.time() - start_time,
                                            status=status, **metadata)

    def log_progress(self, completed: int, total: int, message: Optional[str] = None):
        percent = (completed / total * 100) if total > 0 else 0
        text = f"{completed}/{total} ({percent:.1f}%)"
        if message:
            text += f" {message}"
        self.logger.info(text, extra={'context': {
            'progress_percent': percent,
            'completed_units': completed,
            'total_units': total,
        }})

    def get_timings(self) -> Dict[str, Dict[str, Any]]:
        return self.timings.copy()

    @property
    def current_node(self) -> Optional[str]:
        return self.node_stack[-1] if self.node_stack else None

    @property
    def current_stage(self) -> Optional[str]:
        return self.stage_stack[-1] if self.stage_stack else None


@contextmanager
def cell_scope(cell):
    """Tag log records emitted while rendering one grid cell."""
    col, row = cell
    token = cell_context.set(f"{col},{row}")
    try:
        yield
    finally:
        cell_context.reset(token)
