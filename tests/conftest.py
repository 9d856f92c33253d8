"""Shared fixtures for tileplot tests."""

import logging

import numpy as np
import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handler changes made by setup_logging during a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_dataset(tmp_path):
    """Write text records to a file under tmp_path and return its path."""
    def _write(name, lines):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text('\n'.join(lines) + '\n')
        return path
    return _write


@pytest.fixture
def read_pixels():
    """Load an image file as an RGBA numpy array (rows, cols, 4)."""
    def _read(path):
        with Image.open(path) as image:
            return np.asarray(image.convert("RGBA")).copy()
    return _read


@pytest.fixture
def random_shapes_dataset(write_dataset):
    """Mixed rectangles on a 100x100 world, with corner points fixing the MBR."""
    def _build(name='shapes.csv', count=60, seed=7):
        rng = np.random.default_rng(seed)
        lines = ['0,0,0.5,0.5', '99.5,99.5,100,100']
        for _ in range(count):
            x, y = rng.uniform(0, 95, size=2)
            w, h = rng.uniform(0.5, 30, size=2)
            lines.append(f"{x:.3f},{y:.3f},{min(100, x + w):.3f},{min(100, y + h):.3f}")
        return write_dataset(name, lines)
    return _build
