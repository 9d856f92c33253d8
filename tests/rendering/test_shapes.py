"""Tests for shape kinds, bounding boxes and drawing."""

import numpy as np
import pytest

from tileplot.abstractions.types import BoundingBox, ValueRange
from tileplot.rendering.canvas import TileCanvas
from tileplot.rendering.color_mapper import ValueColorMapper
from tileplot.rendering.shapes import Point, Polygon, Rectangle, ShapeKind, ValuedPoint
from tileplot.rendering.style import PlotStyle, parse_color
from tileplot.rendering.transform import CoordinateTransform

BLACK = (0, 0, 0, 255)
CLEAR = (0, 0, 0, 0)


def draw(shape, style=None, size=10):
    transform = CoordinateTransform(BoundingBox(0, 0, 10, 10), size, size)
    canvas = TileCanvas(transform.full_canvas())
    shape.draw_onto(canvas, transform, style or PlotStyle())
    return np.asarray(canvas.image)


def pixel(pixels, x, y):
    return tuple(int(c) for c in pixels[y, x])


class TestShapeKind:

    @pytest.mark.parametrize("name,expected", [
        ("point", ShapeKind.POINT),
        ("POINT", ShapeKind.POINT),
        ("rect", ShapeKind.RECTANGLE),
        ("polygon", ShapeKind.POLYGON),
        ("valuedPoint", ShapeKind.VALUED_POINT),
        ("valued_point", ShapeKind.VALUED_POINT),
        ("VALUED_POINT", ShapeKind.VALUED_POINT),
        (ShapeKind.RECTANGLE, ShapeKind.RECTANGLE),
    ])
    def test_parse(self, name, expected):
        assert ShapeKind.parse(name) == expected

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown shape kind"):
            ShapeKind.parse("circle")


class TestBoundingBoxes:

    def test_point(self):
        assert Point(3, 4).bounding_box() == BoundingBox(3, 4, 3, 4)

    def test_rectangle_normalised(self):
        assert Rectangle(5, 6, 1, 2).bounding_box() == BoundingBox(1, 2, 5, 6)

    def test_polygon(self):
        poly = Polygon(((0, 0), (4, 1), (2, 5)))
        assert poly.bounding_box() == BoundingBox(0, 0, 4, 5)

    def test_empty_polygon_has_no_extent(self):
        assert Polygon(()).bounding_box() is None


class TestDrawing:

    def test_point(self):
        pixels = draw(Point(3.5, 7.2))
        assert pixel(pixels, 3, 7) == BLACK
        assert (pixels[..., 3] > 0).sum() == 1

    def test_large_point(self):
        pixels = draw(Point(2, 2), PlotStyle(point_size=3))
        assert (pixels[..., 3] > 0).sum() == 9
        assert pixel(pixels, 4, 4) == BLACK

    def test_rectangle_outline(self):
        pixels = draw(Rectangle(2, 2, 5, 5))
        for corner in [(2, 2), (5, 2), (2, 5), (5, 5)]:
            assert pixel(pixels, *corner) == BLACK
        assert pixel(pixels, 3, 3) == CLEAR
        assert pixel(pixels, 4, 4) == CLEAR

    def test_polygon_is_closed(self):
        pixels = draw(Polygon(((1, 1), (8, 1), (8, 8))))
        # Closing edge runs along the diagonal back to the first vertex
        assert pixel(pixels, 4, 4) == BLACK
        assert pixel(pixels, 8, 4) == BLACK

    def test_valued_point_uses_mapper(self):
        style = PlotStyle(color_mapper=ValueColorMapper(ValueRange(0, 10)))
        pixels = draw(ValuedPoint(1, 1, 10), style)
        assert pixel(pixels, 1, 1) == (255, 128, 128, 255)

    def test_valued_point_without_mapper(self):
        pixels = draw(ValuedPoint(1, 1, 10), PlotStyle(stroke=(0, 0, 255, 255)))
        assert pixel(pixels, 1, 1) == (0, 0, 255, 255)

    def test_shape_outside_tile_is_clipped(self):
        transform = CoordinateTransform(BoundingBox(0, 0, 10, 10), 10, 10)
        canvas = TileCanvas(transform.cell_pixel_rect(BoundingBox(0, 0, 5, 5)))
        Rectangle(3, 3, 8, 8).draw_onto(canvas, transform, PlotStyle())
        pixels = np.asarray(canvas.image)
        assert pixels.shape == (5, 5, 4)
        assert pixel(pixels, 3, 4) == BLACK
        assert pixel(pixels, 4, 3) == BLACK
        assert pixel(pixels, 4, 4) == CLEAR


class TestStyle:

    def test_parse_color(self):
        assert parse_color("red") == (255, 0, 0, 255)
        assert parse_color("#00ff0080") == (0, 255, 0, 128)
        assert parse_color((1, 2, 3)) == (1, 2, 3, 255)

    def test_invalid_point_size(self):
        with pytest.raises(ValueError):
            PlotStyle(point_size=0)

    def test_create(self):
        style = PlotStyle.create(color="blue", point_size=2, show_borders=True)
        assert style.stroke == (0, 0, 255, 255)
        assert style.footprint == 2
        assert style.border_color == (128, 128, 128, 255)
