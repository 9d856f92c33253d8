# tileplot/abstractions/types/__init__.py
"""Type definitions for the abstractions layer."""

# Geometry types
from .geometry_types import BoundingBox, MutableBoundingBox, ValueRange

# Processing types
from .processing_types import ProcessingStatus, RenderMode, TileProgress, PlotResult

__all__ = [
    'BoundingBox',
    'MutableBoundingBox',
    'ValueRange',
    'ProcessingStatus',
    'RenderMode',
    'TileProgress',
    'PlotResult',
]
