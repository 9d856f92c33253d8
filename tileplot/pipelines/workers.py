"""Per-cell render tasks.

Tasks are plain picklable values and render_cell is a module-level
function so they can run in a process pool. A task never sees another
task's state: it re-reads the dataset and keeps the shapes that overlap
its own cell.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from ..abstractions.types import BoundingBox
from ..datasource.shape_reader import ShapeSource
from ..grid_systems.partition_grid import GridSpec
from ..infrastructure.logging import cell_scope, get_logger
from ..rendering.shapes import Shape
from ..rendering.style import PlotStyle
from ..rendering.tile_rasterizer import Tile, TileRasterizer
from ..rendering.transform import CoordinateTransform

logger = get_logger(__name__)


@dataclass(frozen=True)
class CellRenderTask:
    """Everything one cell needs to render its tile."""
    source: ShapeSource
    grid: GridSpec
    col: int
    row: int
    transform: CoordinateTransform
    style: PlotStyle
    plot_range: Optional[BoundingBox] = None
    margin: float = 0.0

    @property
    def cell(self):
        return (self.col, self.row)


def cell_shapes(task: CellRenderTask) -> Iterator[Shape]:
    """Stream the shapes replicated into the task's cell."""
    for shape in task.source.iter_shapes(task.plot_range):
        bbox = shape.bounding_box()
        if bbox is None:
            continue
        if task.grid.overlaps_cell(bbox.buffer(task.margin), task.col, task.row):
            yield shape


def render_cell(task: CellRenderTask, cancel_event=None) -> Tile:
    """Render one grid cell into a tile."""
    with cell_scope(task.cell):
        bounds = task.grid.cell_bounds(task.col, task.row)
        rasterizer = TileRasterizer(task.transform, task.style)
        tile = rasterizer.rasterize(bounds, cell_shapes(task), cell=task.cell,
                                    cancel_event=cancel_event)
        logger.debug(f"Rendered cell {task.cell} with {tile.shape_count} shapes")
        return tile
