# tileplot/pipelines/stages/validate_stage.py
"""Input and output checks performed before any dataset scan."""

from ...datasource.shape_reader import ShapeSource
from ...infrastructure.logging import get_logger, log_stage
from ...rendering.compositor import check_output_path
from .base_stage import PipelineStage, StageResult

logger = get_logger(__name__)


class ValidateStage(PipelineStage):
    """Resolve the dataset files and make sure the output can be written."""

    @property
    def name(self) -> str:
        return "validate"

    @log_stage("validate")
    def execute(self, context) -> StageResult:
        config = context.config
        source = ShapeSource(config.input_path, config.shape_kind)
        files = source.files()
        check_output_path(config.output_path, overwrite=config.overwrite)

        context.source = source
        logger.info(f"Input {config.input_path}: {len(files)} file(s), "
                    f"shape kind {source.shape_kind.value}")
        return StageResult(success=True, metrics={'files': len(files)})
