"""Foundation layer - pure types with no dependencies on the rest of tileplot."""

from .types import (
    BoundingBox, MutableBoundingBox, ValueRange,
    ProcessingStatus, RenderMode, TileProgress, PlotResult
)

__all__ = [
    'BoundingBox',
    'MutableBoundingBox',
    'ValueRange',
    'ProcessingStatus',
    'RenderMode',
    'TileProgress',
    'PlotResult',
]
