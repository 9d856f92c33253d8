# tileplot/abstractions/types/geometry_types.py
"""Geometry-related type definitions."""

import math
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in world coordinates.

    Invariant: x1 <= x2 and y1 <= y2. Zero width or height is allowed
    (a single point, a vertical segment); use non_degenerate() before
    dividing by the extent.
    """
    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self):
        if self.x1 > self.x2 or self.y1 > self.y2:
            raise ValueError(
                f"Invalid bounding box ({self.x1}, {self.y1}, {self.x2}, {self.y2}): "
                "lower corner must not exceed upper corner"
            )

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    @property
    def is_degenerate(self) -> bool:
        """True when the box has no area."""
        return self.width <= 0 or self.height <= 0

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)

    def intersects(self, other: 'BoundingBox') -> bool:
        """Closed-interval overlap test; touching edges count."""
        return (self.x1 <= other.x2 and other.x1 <= self.x2 and
                self.y1 <= other.y2 and other.y1 <= self.y2)

    def contains_point(self, x: float, y: float) -> bool:
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2

    def expand(self, other: 'BoundingBox') -> 'BoundingBox':
        """Smallest box covering both boxes."""
        return BoundingBox(
            min(self.x1, other.x1),
            min(self.y1, other.y1),
            max(self.x2, other.x2),
            max(self.y2, other.y2),
        )

    def buffer(self, margin: float) -> 'BoundingBox':
        """Grow the box by margin on every side."""
        if margin <= 0:
            return self
        return BoundingBox(self.x1 - margin, self.y1 - margin,
                           self.x2 + margin, self.y2 + margin)

    def non_degenerate(self, min_extent: float = 1.0) -> 'BoundingBox':
        """Return a box whose zero extents are widened around the centre.

        Used wherever the extent becomes a divisor (grid cell sizes,
        coordinate scaling).
        """
        if not self.is_degenerate:
            return self
        cx, cy = self.center
        half = min_extent / 2
        x1, x2 = self.x1, self.x2
        y1, y2 = self.y1, self.y2
        if self.width <= 0:
            x1, x2 = cx - half, cx + half
        if self.height <= 0:
            y1, y2 = cy - half, cy + half
        return BoundingBox(x1, y1, x2, y2)

    @classmethod
    def from_string(cls, text: str) -> 'BoundingBox':
        """Parse "x1,y1,x2,y2"; corners are normalised."""
        parts = [p.strip() for p in text.split(',')]
        if len(parts) != 4:
            raise ValueError(f"Expected 'x1,y1,x2,y2', got {text!r}")
        x1, y1, x2, y2 = (float(p) for p in parts)
        return cls(min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))

    def __str__(self) -> str:
        return f"{self.x1},{self.y1},{self.x2},{self.y2}"


class MutableBoundingBox:
    """Accumulator used while scanning a dataset for its MBR."""

    def __init__(self):
        self.x1: Optional[float] = None
        self.y1: Optional[float] = None
        self.x2: Optional[float] = None
        self.y2: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.x1 is None

    def add(self, box: BoundingBox):
        if self.is_empty:
            self.x1, self.y1, self.x2, self.y2 = box.as_tuple()
            return
        self.x1 = min(self.x1, box.x1)
        self.y1 = min(self.y1, box.y1)
        self.x2 = max(self.x2, box.x2)
        self.y2 = max(self.y2, box.y2)

    def to_bounding_box(self) -> Optional[BoundingBox]:
        if self.is_empty:
            return None
        return BoundingBox(self.x1, self.y1, self.x2, self.y2)


@dataclass(frozen=True)
class ValueRange:
    """Inclusive integer range of values carried by valued points."""
    min_value: int
    max_value: int

    def __post_init__(self):
        if self.min_value > self.max_value:
            raise ValueError(
                f"Invalid value range: min {self.min_value} > max {self.max_value}"
            )

    @property
    def span(self) -> int:
        return self.max_value - self.min_value

    @classmethod
    def from_string(cls, text: str) -> 'ValueRange':
        """Parse "min,max" (also accepts "min..max"); fractional bounds round outward."""
        separator = '..' if '..' in text else ','
        parts = [p.strip() for p in text.split(separator)]
        if len(parts) != 2:
            raise ValueError(f"Expected 'min,max', got {text!r}")
        lo, hi = float(parts[0]), float(parts[1])
        if not (math.isfinite(lo) and math.isfinite(hi)):
            raise ValueError(f"Value range bounds must be finite, got {text!r}")
        return cls(math.floor(lo), math.ceil(hi))

    def __str__(self) -> str:
        return f"{self.min_value},{self.max_value}"
