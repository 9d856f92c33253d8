"""Tests for per-cell render tasks."""

import pickle

import numpy as np

from tileplot.abstractions.types import BoundingBox
from tileplot.datasource import ShapeSource
from tileplot.grid_systems import GridSpec
from tileplot.pipelines.workers import CellRenderTask, cell_shapes, render_cell
from tileplot.rendering.shapes import Rectangle
from tileplot.rendering.style import PlotStyle
from tileplot.rendering.transform import CoordinateTransform

WORLD = BoundingBox(0, 0, 100, 100)


def make_task(path, col, row, margin=0.0):
    return CellRenderTask(
        source=ShapeSource(path, "rectangle"),
        grid=GridSpec(WORLD, rows=2, cols=2),
        col=col,
        row=row,
        transform=CoordinateTransform(WORLD, 100, 100),
        style=PlotStyle(),
        margin=margin,
    )


def test_cell_shapes_replicates_seam_rectangle(write_dataset):
    path = write_dataset("rects.csv", ["40,10,60,20", "70,70,80,80"])

    assert list(cell_shapes(make_task(path, 0, 0))) == [Rectangle(40, 10, 60, 20)]
    assert list(cell_shapes(make_task(path, 1, 0))) == [Rectangle(40, 10, 60, 20)]
    assert list(cell_shapes(make_task(path, 1, 1))) == [Rectangle(70, 70, 80, 80)]
    assert list(cell_shapes(make_task(path, 0, 1))) == []


def test_margin_extends_cell(write_dataset):
    path = write_dataset("rects.csv", ["45,10,49.5,20"])
    assert list(cell_shapes(make_task(path, 1, 0))) == []
    assert len(list(cell_shapes(make_task(path, 1, 0, margin=1.0)))) == 1


def test_render_cell(write_dataset):
    path = write_dataset("rects.csv", ["40,10,60,20"])
    tile = render_cell(make_task(path, 1, 0))

    assert tile.cell == (1, 0)
    assert tile.origin == (50, 0)
    assert tile.shape_count == 1
    pixels = np.asarray(tile.image)
    # Top edge from x=50 to x=60 falls inside this tile
    assert tuple(pixels[10, 0]) == (0, 0, 0, 255)
    assert tuple(pixels[10, 10]) == (0, 0, 0, 255)
    assert pixels[10, 11, 3] == 0


def test_task_is_picklable(write_dataset):
    task = make_task(write_dataset("rects.csv", ["0,0,1,1"]), 0, 1, margin=0.5)
    restored = pickle.loads(pickle.dumps(task))
    assert restored.cell == (0, 1)
    assert restored.grid == task.grid
    assert restored.source.path == task.source.path
    assert restored.transform == task.transform
    assert restored.transform.mapping_mbr == task.transform.mapping_mbr
