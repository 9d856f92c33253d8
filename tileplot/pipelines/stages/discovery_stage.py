# tileplot/pipelines/stages/discovery_stage.py
"""Discover the world extent and, for valued points, the value range."""

from ...datasource.statistics import compute_dataset_mbr, compute_value_range
from ...infrastructure.logging import get_logger, log_stage
from .base_stage import PipelineStage, StageResult

logger = get_logger(__name__)


class DiscoveryStage(PipelineStage):
    """An explicit plot range replaces the dataset scan for the MBR."""

    @property
    def name(self) -> str:
        return "discover"

    @log_stage("discover")
    def execute(self, context) -> StageResult:
        config = context.config

        if config.plot_range is not None:
            file_mbr = config.plot_range
            logger.info(f"Using plot range {file_mbr} as MBR")
        else:
            file_mbr = compute_dataset_mbr(context.source)
        context.file_mbr = file_mbr.non_degenerate()

        if config.is_valued:
            if config.value_range is not None:
                context.value_range = config.value_range
            else:
                context.value_range = compute_value_range(context.source, config.plot_range)

        return StageResult(
            success=True,
            data={
                'file_mbr': str(context.file_mbr),
                'value_range': str(context.value_range) if context.value_range else None,
            }
        )
