"""Rendering primitives: shapes, transform, rasterisation and compositing."""

from .color_mapper import ValueColorMapper, MAX_HUE
from .transform import CoordinateTransform, PixelRect
from .style import PlotStyle, parse_color
from .canvas import TileCanvas
from .shapes import ShapeKind, Point, Rectangle, Polygon, ValuedPoint, Shape
from .tile_rasterizer import Tile, TileRasterizer
from .compositor import (
    Compositor, CombineSource, adjust_to_aspect_ratio, check_output_path, commit_image
)
from .legend import draw_scale, render_scale

__all__ = [
    'ValueColorMapper',
    'MAX_HUE',
    'CoordinateTransform',
    'PixelRect',
    'PlotStyle',
    'parse_color',
    'TileCanvas',
    'ShapeKind',
    'Point',
    'Rectangle',
    'Polygon',
    'ValuedPoint',
    'Shape',
    'Tile',
    'TileRasterizer',
    'Compositor',
    'CombineSource',
    'adjust_to_aspect_ratio',
    'check_output_path',
    'commit_image',
    'draw_scale',
    'render_scale',
]
