# tileplot/pipelines/orchestrator.py
"""Plot job orchestrator: runs the stages and owns cancellation."""

import threading
import time
from enum import Enum
from typing import Any, Dict, List, Optional

from ..abstractions.types import PlotResult
from ..config.plot_config import PlotConfig
from ..exceptions import PlotCancelledError
from ..infrastructure.logging import LoggingContext, get_logger
from .plot_context import PlotContext
from .stages import (
    CommitStage, DiscoveryStage, LayoutStage, PipelineStage, RenderStage, StageStatus,
    ValidateStage
)

logger = get_logger(__name__)


class PipelineStatus(Enum):
    """Plot job status."""
    INITIALIZING = "initializing"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PlotOrchestrator:
    """
    Run a plot job as a fixed sequence of stages.

    validate -> discover -> layout -> render -> commit. Any stage failure
    fails the whole job and nothing is written to the output path.
    """

    def __init__(self, stages: Optional[List[PipelineStage]] = None):
        self.stages: List[PipelineStage] = stages or [
            ValidateStage(),
            DiscoveryStage(),
            LayoutStage(),
            RenderStage(),
            CommitStage(),
        ]
        self.status = PipelineStatus.INITIALIZING
        self.context: Optional[PlotContext] = None
        self._cancel_event = threading.Event()

    def run(self, plot_config: PlotConfig, job_id: Optional[str] = None) -> PlotResult:
        """Render plot_config.input_path into plot_config.output_path."""
        self._cancel_event = threading.Event()
        for stage in self.stages:
            stage.reset()

        logging_context = LoggingContext(job_id=job_id)
        context = PlotContext(
            config=plot_config,
            logging_context=logging_context,
            cancel_event=self._cancel_event,
        )
        self.context = context
        self.status = PipelineStatus.RUNNING
        start_time = time.time()

        with logging_context.pipeline('plot',
                                      input=plot_config.input_path,
                                      output=plot_config.output_path):
            for stage in self.stages:
                self._run_stage(stage, context)

        self.status = PipelineStatus.COMPLETED
        result = self._build_result(context)
        logger.info(f"Plot written to {result.output_path} "
                    f"({result.width}x{result.height}, {result.mode.value}, "
                    f"{result.tile_count} tiles) in {time.time() - start_time:.2f}s")
        return result

    def _run_stage(self, stage: PipelineStage, context: PlotContext):
        if self._cancel_event.is_set():
            stage.status = StageStatus.CANCELLED
            self.status = PipelineStatus.CANCELLED
            raise PlotCancelledError(f"Plot cancelled before stage {stage.name}")

        stage.status = StageStatus.RUNNING
        try:
            stage.result = stage.execute(context)
        except PlotCancelledError as e:
            stage.status = StageStatus.CANCELLED
            stage.error = str(e)
            self.status = PipelineStatus.CANCELLED
            raise
        except Exception as e:
            stage.status = StageStatus.FAILED
            stage.error = str(e)
            self.status = PipelineStatus.FAILED
            raise
        stage.status = StageStatus.COMPLETED

    def cancel(self):
        """Abort the running job; no output is committed afterwards."""
        logger.warning("Cancellation requested")
        self._cancel_event.set()
        for stage in self.stages:
            stage.cancel()

    def get_progress_summary(self) -> Dict[str, Any]:
        if self.context is None:
            return {'completion_percentage': 0.0, 'total_tiles': 0}
        return self.context.get_progress_summary()

    def get_stage_statuses(self) -> Dict[str, str]:
        return {stage.name: stage.status.value for stage in self.stages}

    def _build_result(self, context: PlotContext) -> PlotResult:
        timings = {
            name: info['duration']
            for name, info in context.logging_context.get_timings().items()
        }
        grid = context.grid
        return PlotResult(
            output_path=str(context.config.output_path),
            width=context.width,
            height=context.height,
            mode=context.mode,
            rows=grid.rows if grid else 1,
            cols=grid.cols if grid else 1,
            tile_count=len(context.tiles),
            shape_count=sum(t.shape_count for t in context.tiles),
            stage_timings=timings,
            metadata={
                'job_id': context.logging_context.job_id,
                'file_mbr': str(context.file_mbr),
                'value_range': str(context.value_range) if context.value_range else None,
            },
        )


def plot(plot_config: PlotConfig) -> PlotResult:
    """Run one plot job with the default stages."""
    return PlotOrchestrator().run(plot_config)
