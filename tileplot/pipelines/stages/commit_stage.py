# tileplot/pipelines/stages/commit_stage.py
"""Merge the rendered tiles and atomically publish the final image."""

from ...infrastructure.logging import get_logger, log_stage
from ...rendering.compositor import Compositor, check_output_path, commit_image
from .base_stage import PipelineStage, StageResult

logger = get_logger(__name__)


class CommitStage(PipelineStage):

    def __init__(self, compositor: Compositor = None):
        super().__init__()
        self.compositor = compositor or Compositor()

    @property
    def name(self) -> str:
        return "commit"

    @log_stage("commit")
    def execute(self, context) -> StageResult:
        config = context.config
        image = self.compositor.merge_tiles(context.tiles, context.width, context.height,
                                            context.expected_tiles)
        context.image = image

        check_output_path(config.output_path, overwrite=config.overwrite)
        path = commit_image(image, config.output_path)
        return StageResult(success=True, data={'output_path': str(path)})
