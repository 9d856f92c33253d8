"""Rasterise the shapes of one grid cell into a transparent tile."""

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from PIL import Image

from ..abstractions.types import BoundingBox
from ..exceptions import PlotCancelledError
from .canvas import TileCanvas
from .shapes import Shape
from .style import PlotStyle
from .transform import CoordinateTransform

logger = logging.getLogger(__name__)

# Shapes drawn between two polls of the cancellation event
CANCEL_CHECK_INTERVAL = 1000


@dataclass
class Tile:
    """Rendered cell image placed at a pixel origin of the final canvas."""
    cell: Tuple[int, int]
    image: Image.Image
    origin: Tuple[int, int]
    shape_count: int = 0

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


class TileRasterizer:
    """Draw shapes for one cell using the job-wide transform and style."""

    def __init__(self, transform: CoordinateTransform, style: PlotStyle):
        self.transform = transform
        self.style = style

    def rasterize(self, cell_bounds: BoundingBox, shapes: Iterable[Shape],
                  cell: Tuple[int, int] = (0, 0),
                  cancel_event=None) -> Tile:
        """Render every shape onto a tile covering the cell's pixel rectangle.

        ``shapes`` is consumed lazily. Any exception raised while decoding
        or drawing a shape propagates and fails the tile.
        """
        rect = self.transform.cell_pixel_rect(cell_bounds)
        canvas = TileCanvas(rect)
        count = 0
        for shape in shapes:
            shape.draw_onto(canvas, self.transform, self.style)
            count += 1
            if cancel_event is not None and count % CANCEL_CHECK_INTERVAL == 0 and cancel_event.is_set():
                raise PlotCancelledError(f"Rendering of cell {cell} cancelled")

        if self.style.show_borders and rect.width > 0 and rect.height > 0:
            canvas.rectangle(rect.x1, rect.y1, rect.x2 - 1, rect.y2 - 1, self.style.border_color)

        logger.debug(f"Cell {cell}: drew {count} shapes into {rect.width}x{rect.height} tile at {rect.origin}")
        return Tile(cell=cell, image=canvas.image, origin=rect.origin, shape_count=count)

    def rasterize_all(self, shapes: Iterable[Shape], cancel_event=None) -> Tile:
        """Local path: one pass over the whole file MBR."""
        return self.rasterize(self.transform.file_mbr.non_degenerate(), shapes,
                              cell=(0, 0), cancel_event=cancel_event)
