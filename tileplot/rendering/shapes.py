"""Shape variants and their drawing contract.

Every shape exposes ``bounding_box()`` (``None`` when the shape has no
spatial extent and must be skipped) and ``draw_onto(canvas, transform,
style)``, which draws in global pixel coordinates onto a TileCanvas.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from ..abstractions.types import BoundingBox
from .canvas import TileCanvas
from .style import PlotStyle
from .transform import CoordinateTransform


class ShapeKind(Enum):
    """Kinds of record a dataset may hold."""
    POINT = "point"
    RECTANGLE = "rectangle"
    POLYGON = "polygon"
    VALUED_POINT = "valued_point"

    @classmethod
    def parse(cls, name: Union[str, 'ShapeKind']) -> 'ShapeKind':
        """Accept enum members, values, and spellings such as 'valuedPoint' or 'rect'."""
        if isinstance(name, cls):
            return name
        key = str(name).strip().replace('-', '_')
        if key.isupper():
            key = key.lower()
        key = ''.join('_' + c.lower() if c.isupper() else c for c in key).lstrip('_')
        aliases = {'rect': 'rectangle', 'poly': 'polygon', 'valued': 'valued_point'}
        key = aliases.get(key, key)
        try:
            return cls(key)
        except ValueError:
            choices = ', '.join(k.value for k in cls)
            raise ValueError(f"Unknown shape kind {name!r}; expected one of: {choices}") from None


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def bounding_box(self) -> Optional[BoundingBox]:
        return BoundingBox(self.x, self.y, self.x, self.y)

    def draw_onto(self, canvas: TileCanvas, transform: CoordinateTransform, style: PlotStyle):
        px, py = transform.to_pixel(self.x, self.y)
        canvas.point(px, py, style.stroke, style.point_size)


@dataclass(frozen=True)
class Rectangle:
    x1: float
    y1: float
    x2: float
    y2: float

    def bounding_box(self) -> Optional[BoundingBox]:
        return BoundingBox(min(self.x1, self.x2), min(self.y1, self.y2),
                           max(self.x1, self.x2), max(self.y1, self.y2))

    def draw_onto(self, canvas: TileCanvas, transform: CoordinateTransform, style: PlotStyle):
        ax, ay = transform.to_pixel(self.x1, self.y1)
        bx, by = transform.to_pixel(self.x2, self.y2)
        canvas.rectangle(ax, ay, bx, by, style.stroke)


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Tuple[float, float], ...]

    def bounding_box(self) -> Optional[BoundingBox]:
        if not self.points:
            return None
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return BoundingBox(min(xs), min(ys), max(xs), max(ys))

    def draw_onto(self, canvas: TileCanvas, transform: CoordinateTransform, style: PlotStyle):
        if not self.points:
            return
        pixels = [transform.to_pixel(x, y) for x, y in self.points]
        canvas.polyline(pixels, style.stroke, closed=True)


@dataclass(frozen=True)
class ValuedPoint:
    x: float
    y: float
    value: float

    def bounding_box(self) -> Optional[BoundingBox]:
        return BoundingBox(self.x, self.y, self.x, self.y)

    def draw_onto(self, canvas: TileCanvas, transform: CoordinateTransform, style: PlotStyle):
        px, py = transform.to_pixel(self.x, self.y)
        if style.color_mapper is not None:
            color = style.color_mapper.color(self.value)
        else:
            color = style.stroke
        canvas.point(px, py, color, style.point_size)


Shape = Union[Point, Rectangle, Polygon, ValuedPoint]
