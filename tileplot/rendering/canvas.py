"""Tile-local drawing surface addressed in global pixel coordinates."""

from typing import Sequence, Tuple

from PIL import Image, ImageDraw

from .color_mapper import RGBA
from .transform import PixelRect

TRANSPARENT: RGBA = (0, 0, 0, 0)


class TileCanvas:
    """Transparent RGBA image covering one pixel rectangle of the final canvas.

    Drawing calls take global pixel coordinates; the tile origin is
    subtracted here and Pillow clips whatever falls outside the tile.
    """

    def __init__(self, rect: PixelRect):
        self.rect = rect
        self.image = Image.new("RGBA", rect.size, TRANSPARENT)
        self._draw = ImageDraw.Draw(self.image)

    @property
    def origin(self) -> Tuple[int, int]:
        return self.rect.origin

    def _local(self, x: int, y: int) -> Tuple[int, int]:
        return x - self.rect.x1, y - self.rect.y1

    def point(self, x: int, y: int, color: RGBA, size: int = 1):
        lx, ly = self._local(x, y)
        if size <= 1:
            self._draw.point((lx, ly), fill=color)
        else:
            self._draw.rectangle([lx, ly, lx + size - 1, ly + size - 1], fill=color)

    def rectangle(self, x1: int, y1: int, x2: int, y2: int, color: RGBA):
        """Outline of the rectangle spanned by two corners, inclusive."""
        ax, ay = self._local(min(x1, x2), min(y1, y2))
        bx, by = self._local(max(x1, x2), max(y1, y2))
        # Outline must be clipped per pixel to match across tiles
        self._draw.line([(ax, ay), (bx, ay), (bx, by), (ax, by), (ax, ay)], fill=color, width=1)

    def polyline(self, points: Sequence[Tuple[int, int]], color: RGBA, closed: bool = False):
        local = [self._local(x, y) for x, y in points]
        if len(local) == 1:
            self._draw.point(local[0], fill=color)
            return
        if closed and len(local) > 2:
            local.append(local[0])
        self._draw.line(local, fill=color, width=1)
