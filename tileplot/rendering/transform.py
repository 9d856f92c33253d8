"""World to pixel coordinate transform shared by every render task."""

import math
from dataclasses import dataclass
from typing import Tuple

from ..abstractions.types import BoundingBox


@dataclass(frozen=True)
class PixelRect:
    """Half-open pixel rectangle [x1, x2) x [y1, y2) in canvas space."""
    x1: int
    y1: int
    x2: int
    y2: int

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    @property
    def origin(self) -> Tuple[int, int]:
        return (self.x1, self.y1)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class CoordinateTransform:
    """Map world coordinates of the file MBR onto a width x height canvas.

    With vertical_flip the world Y axis is negated before mapping, which
    puts larger world Y values at the top of the image.
    """
    file_mbr: BoundingBox
    width: int
    height: int
    vertical_flip: bool = False

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        mbr = self.file_mbr.non_degenerate()
        if self.vertical_flip:
            mbr = BoundingBox(mbr.x1, -mbr.y2, mbr.x2, -mbr.y1)
        object.__setattr__(self, '_mbr', mbr)

    @property
    def mapping_mbr(self) -> BoundingBox:
        """The MBR actually used for mapping (flipped when vertical_flip)."""
        return self._mbr

    @property
    def scale(self) -> float:
        """Pixels per world square unit."""
        mbr = self._mbr
        return (self.width * self.height) / (mbr.width * mbr.height)

    def to_pixel_float(self, x: float, y: float) -> Tuple[float, float]:
        mbr = self._mbr
        if self.vertical_flip:
            y = -y
        px = (x - mbr.x1) * self.width / mbr.width
        py = (y - mbr.y1) * self.height / mbr.height
        return px, py

    def to_pixel(self, x: float, y: float) -> Tuple[int, int]:
        px, py = self.to_pixel_float(x, y)
        return math.floor(px), math.floor(py)

    def world_margin(self, pixels: int) -> float:
        """World distance covering the given number of pixels on either axis."""
        mbr = self._mbr
        return pixels * max(mbr.width / self.width, mbr.height / self.height)

    def cell_pixel_rect(self, cell: BoundingBox) -> PixelRect:
        """Pixel rectangle covered by a world cell.

        The lower corner is floored and the upper corner ceiled, so that
        adjacent cells share boundary pixels instead of leaving gaps. The
        result is clamped to the canvas.
        """
        ax, ay = self.to_pixel_float(cell.x1, cell.y1)
        bx, by = self.to_pixel_float(cell.x2, cell.y2)
        x1 = max(0, math.floor(min(ax, bx)))
        y1 = max(0, math.floor(min(ay, by)))
        x2 = min(self.width, math.ceil(max(ax, bx)))
        y2 = min(self.height, math.ceil(max(ay, by)))
        return PixelRect(x1, y1, max(x1, x2), max(y1, y2))

    def full_canvas(self) -> PixelRect:
        return PixelRect(0, 0, self.width, self.height)
