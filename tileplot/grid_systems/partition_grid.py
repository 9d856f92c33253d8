"""Uniform grid partitioning of world space into render cells."""

import math
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Tuple, TypeVar

from ..abstractions.types import BoundingBox

logger = logging.getLogger(__name__)

S = TypeVar('S')

CellId = Tuple[int, int]


@dataclass(frozen=True)
class CellInfo:
    """One cell of a partition grid."""
    col: int
    row: int
    index: int
    bounds: BoundingBox

    @property
    def cell_id(self) -> CellId:
        return (self.col, self.row)


@dataclass(frozen=True)
class GridSpec:
    """A rows x cols uniform grid exactly tiling an origin box.

    Cells are addressed by (col, row) with (0, 0) at the lower-left world
    corner; the linear index is row * cols + col. The last column and row
    end exactly on the origin's far edges so the union of all cells is the
    origin with no gaps.
    """
    origin: BoundingBox
    rows: int
    cols: int

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid needs at least one row and column, got {self.rows}x{self.cols}")
        if self.origin.is_degenerate:
            object.__setattr__(self, 'origin', self.origin.non_degenerate())

    @classmethod
    def for_parallelism(cls, world: BoundingBox, target_cells: int) -> 'GridSpec':
        """Build a grid of at least target_cells cells with near-square cells.

        Starting at 1x1, a column is added while cells are wider than tall,
        otherwise a row, until rows * cols >= target_cells.
        """
        if target_cells < 1:
            raise ValueError(f"target_cells must be >= 1, got {target_cells}")
        world = world.non_degenerate()
        rows = cols = 1
        while rows * cols < target_cells:
            if world.width / cols > world.height / rows:
                cols += 1
            else:
                rows += 1
        logger.debug(f"Grid for {target_cells} cells over {world}: {rows} rows x {cols} cols")
        return cls(origin=world, rows=rows, cols=cols)

    @property
    def cell_width(self) -> float:
        return self.origin.width / self.cols

    @property
    def cell_height(self) -> float:
        return self.origin.height / self.rows

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    def cell_index(self, col: int, row: int) -> int:
        return row * self.cols + col

    def cell_bounds(self, col: int, row: int) -> BoundingBox:
        """World rectangle of one cell."""
        if not (0 <= col < self.cols and 0 <= row < self.rows):
            raise IndexError(f"Cell ({col}, {row}) outside {self.cols}x{self.rows} grid")
        o = self.origin
        x1 = o.x1 + col * self.cell_width
        y1 = o.y1 + row * self.cell_height
        x2 = o.x2 if col == self.cols - 1 else o.x1 + (col + 1) * self.cell_width
        y2 = o.y2 if row == self.rows - 1 else o.y1 + (row + 1) * self.cell_height
        return BoundingBox(x1, y1, x2, y2)

    def cell(self, col: int, row: int) -> CellInfo:
        return CellInfo(col, row, self.cell_index(col, row), self.cell_bounds(col, row))

    def cell_by_index(self, index: int) -> CellInfo:
        if not 0 <= index < self.cell_count:
            raise IndexError(f"Cell index {index} outside grid of {self.cell_count} cells")
        row, col = divmod(index, self.cols)
        return self.cell(col, row)

    def cells(self) -> Iterator[CellInfo]:
        """All cells in linear index order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield self.cell(col, row)

    def overlapping_cell_range(self, bbox: BoundingBox) -> Tuple[int, int, int, int]:
        """Inclusive (col_start, row_start, col_end, row_end) covering bbox.

        Indices are floor-based and clamped to the grid, so a box partly
        or wholly outside the origin maps onto the nearest edge cells.
        """
        o = self.origin
        col_start = self._clamp(math.floor((bbox.x1 - o.x1) / self.cell_width), self.cols)
        col_end = self._clamp(math.floor((bbox.x2 - o.x1) / self.cell_width), self.cols)
        row_start = self._clamp(math.floor((bbox.y1 - o.y1) / self.cell_height), self.rows)
        row_end = self._clamp(math.floor((bbox.y2 - o.y1) / self.cell_height), self.rows)
        return col_start, row_start, col_end, row_end

    def overlapping_cells(self, bbox: BoundingBox) -> Set[CellId]:
        """Every cell a shape with this bounding box must be replicated into."""
        col_start, row_start, col_end, row_end = self.overlapping_cell_range(bbox)
        return {
            (col, row)
            for col in range(col_start, col_end + 1)
            for row in range(row_start, row_end + 1)
        }

    def overlaps_cell(self, bbox: BoundingBox, col: int, row: int) -> bool:
        """Same answer as (col, row) in overlapping_cells(bbox), without the set."""
        col_start, row_start, col_end, row_end = self.overlapping_cell_range(bbox)
        return col_start <= col <= col_end and row_start <= row <= row_end

    def assign(self, shapes: Iterable[S], margin: float = 0.0) -> Iterator[Tuple[CellId, S]]:
        """Yield (cell, shape) for every cell each shape overlaps.

        Shapes without a bounding box are skipped. margin pads each
        bounding box before the overlap query.
        """
        for shape in shapes:
            bbox: Optional[BoundingBox] = shape.bounding_box()
            if bbox is None:
                continue
            for cell_id in sorted(self.overlapping_cells(bbox.buffer(margin))):
                yield cell_id, shape

    def partition(self, shapes: Iterable[S], margin: float = 0.0) -> List[List[S]]:
        """Materialise assign() into one shape list per cell, by linear index."""
        buckets: List[List[S]] = [[] for _ in range(self.cell_count)]
        for (col, row), shape in self.assign(shapes, margin):
            buckets[self.cell_index(col, row)].append(shape)
        return buckets

    @staticmethod
    def _clamp(index: int, size: int) -> int:
        return max(0, min(size - 1, index))
