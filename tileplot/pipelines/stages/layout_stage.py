# tileplot/pipelines/stages/layout_stage.py
"""Fix the canvas size, transform, style, render mode and grid."""

from ...abstractions.types import RenderMode
from ...grid_systems.partition_grid import GridSpec
from ...infrastructure.logging import get_logger, log_stage
from ...rendering.color_mapper import ValueColorMapper
from ...rendering.compositor import adjust_to_aspect_ratio
from ...rendering.style import PlotStyle
from ...rendering.transform import CoordinateTransform
from .base_stage import PipelineStage, StageResult

logger = get_logger(__name__)


def choose_render_mode(config, source) -> RenderMode:
    """Distributed for split inputs or inputs spanning several blocks."""
    if config.force_local:
        return RenderMode.LOCAL
    if config.force_distributed:
        return RenderMode.DISTRIBUTED
    if source.is_split():
        return RenderMode.DISTRIBUTED
    blocks = source.total_size() / config.block_size_bytes
    if blocks > config.local_block_threshold:
        return RenderMode.DISTRIBUTED
    return RenderMode.LOCAL


class LayoutStage(PipelineStage):

    @property
    def name(self) -> str:
        return "layout"

    @log_stage("layout")
    def execute(self, context) -> StageResult:
        config = context.config
        width, height = config.width, config.height
        if config.keep_aspect_ratio:
            width, height = adjust_to_aspect_ratio(context.file_mbr, width, height)
        context.width, context.height = width, height

        context.transform = CoordinateTransform(context.file_mbr, width, height,
                                                config.vertical_flip)
        mapper = ValueColorMapper(context.value_range) if context.value_range else None
        context.style = PlotStyle.create(
            color=config.color,
            color_mapper=mapper,
            point_size=config.point_size,
            show_borders=config.show_borders,
            border_color=config.border_color,
        )
        context.set('margin', context.transform.world_margin(context.style.footprint))

        context.mode = choose_render_mode(config, context.source)
        if context.mode is RenderMode.DISTRIBUTED:
            context.grid = GridSpec.for_parallelism(context.file_mbr, config.max_workers)
            logger.info(f"Distributed render: {width}x{height} image, "
                        f"{context.grid.rows}x{context.grid.cols} grid")
        else:
            logger.info(f"Local render: {width}x{height} image")

        return StageResult(
            success=True,
            data={
                'width': width,
                'height': height,
                'mode': context.mode.value,
                'cells': context.expected_tiles,
            }
        )
