"""Tests for tile merging, image combination and atomic commit."""

import os
import stat
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from tileplot.abstractions.types import BoundingBox
from tileplot.exceptions import (
    MissingImageError, MissingTileError, OutputExistsError, OutputNotWritableError
)
from tileplot.rendering.compositor import (
    CombineSource, Compositor, adjust_to_aspect_ratio, check_output_path, commit_image
)
from tileplot.rendering.tile_rasterizer import Tile

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def solid_tile(cell, origin, size, color):
    return Tile(cell=cell, image=Image.new("RGBA", size, color), origin=origin)


class TestAspectRatio:

    def test_wide_mbr_shrinks_height(self):
        assert adjust_to_aspect_ratio(BoundingBox(0, 0, 20, 10), 200, 200) == (200, 100)

    def test_tall_mbr_shrinks_width(self):
        assert adjust_to_aspect_ratio(BoundingBox(0, 0, 10, 40), 100, 100) == (25, 100)

    def test_square_canvas_kept_for_square_mbr(self):
        assert adjust_to_aspect_ratio(BoundingBox(0, 0, 10, 10), 100, 50) == (50, 50)

    def test_never_below_one_pixel(self):
        assert adjust_to_aspect_ratio(BoundingBox(0, 0, 10000, 1), 100, 100) == (100, 1)


class TestMergeTiles:

    def setup_method(self):
        self.compositor = Compositor()

    def test_single_full_tile_adopted(self):
        tile = solid_tile((0, 0), (0, 0), (20, 10), RED)
        assert self.compositor.merge_tiles([tile], 20, 10, 1) is tile.image

    def test_tiles_placed_at_origins(self):
        tiles = [
            solid_tile((1, 0), (10, 0), (10, 10), BLUE),
            solid_tile((0, 0), (0, 0), (10, 10), RED),
        ]
        image = self.compositor.merge_tiles(tiles, 20, 10, 2)
        pixels = np.asarray(image)
        assert tuple(pixels[5, 5]) == RED
        assert tuple(pixels[5, 15]) == BLUE

    def test_transparent_areas_do_not_erase(self):
        """Overlapping tiles combine with "over", not replace."""
        marked = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
        marked.putpixel((9, 0), RED)
        tiles = [
            Tile(cell=(0, 0), image=marked, origin=(0, 0)),
            Tile(cell=(1, 0), image=Image.new("RGBA", (10, 10), (0, 0, 0, 0)), origin=(9, 0)),
        ]
        pixels = np.asarray(self.compositor.merge_tiles(tiles, 19, 10, 2))
        assert tuple(pixels[0, 9]) == RED

    def test_missing_tile(self):
        tile = solid_tile((0, 0), (0, 0), (10, 10), RED)
        with pytest.raises(MissingTileError) as exc_info:
            self.compositor.merge_tiles([tile], 20, 10, 2)
        assert exc_info.value.expected == 2
        assert exc_info.value.received == 1

    def test_overlay_crops_outside_parts(self):
        canvas = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
        Compositor.overlay(canvas, Image.new("RGBA", (6, 6), RED), (-3, 7))
        pixels = np.asarray(canvas)
        assert (pixels[..., 3] > 0).sum() == 3 * 3
        assert tuple(pixels[9, 2]) == RED


class TestCombineImages:

    def write_image(self, path, color):
        Image.new("RGBA", (10, 10), color).save(path)
        return path

    def test_images_placed_within_union(self, tmp_path):
        sources = [
            CombineSource(BoundingBox(0, 0, 10, 10), self.write_image(tmp_path / "a.png", RED)),
            CombineSource(BoundingBox(10, 0, 20, 10), self.write_image(tmp_path / "b.png", BLUE)),
        ]
        image = Compositor().combine_images(sources, 200, 200)

        assert image.size == (200, 100)
        pixels = np.asarray(image)
        assert tuple(pixels[10, 10]) == RED
        assert tuple(pixels[50, 150]) == BLUE

    def test_missing_data_image(self, tmp_path):
        source = CombineSource(BoundingBox(0, 0, 1, 1), tmp_path / "absent.png")
        with pytest.raises(MissingImageError):
            Compositor().combine_images([source], 10, 10)

    def test_missing_boundaries_image_is_skipped(self, tmp_path):
        dataset = tmp_path / "dataset"
        dataset.mkdir()
        source = CombineSource.from_directory(dataset, BoundingBox(0, 0, 1, 1))
        self.write_image(source.data_image, RED)

        image = Compositor().combine_images([source], 10, 10, include_boundaries=True)
        assert tuple(np.asarray(image)[5, 5]) == RED

    def test_boundaries_drawn_over_data(self, tmp_path):
        dataset = tmp_path / "dataset"
        dataset.mkdir()
        source = CombineSource.from_directory(dataset, BoundingBox(0, 0, 1, 1))
        self.write_image(source.data_image, RED)
        self.write_image(source.boundaries_image, BLUE)

        image = Compositor().combine_images([source], 10, 10, include_boundaries=True)
        assert tuple(np.asarray(image)[5, 5]) == BLUE

    def test_no_sources(self):
        with pytest.raises(ValueError):
            Compositor().combine_images([], 10, 10)


class TestOutput:

    def test_existing_output_rejected(self, tmp_path):
        target = tmp_path / "out.png"
        target.write_bytes(b"old")
        with pytest.raises(OutputExistsError):
            check_output_path(target)
        assert check_output_path(target, overwrite=True) == target

    def test_directory_output_rejected(self, tmp_path):
        with pytest.raises(OutputExistsError):
            check_output_path(tmp_path, overwrite=True)

    def test_missing_parent(self, tmp_path):
        with pytest.raises(OutputNotWritableError):
            check_output_path(tmp_path / "missing" / "out.png")

    def test_commit_writes_png(self, tmp_path):
        target = tmp_path / "out.png"
        commit_image(Image.new("RGBA", (4, 3), RED), target)

        with Image.open(target) as written:
            assert written.format == "PNG"
            assert written.size == (4, 3)
        assert [p.name for p in tmp_path.iterdir()] == ["out.png"]

    def test_commit_replaces_existing(self, tmp_path):
        target = tmp_path / "out.png"
        target.write_bytes(b"old")
        commit_image(Image.new("RGBA", (2, 2), BLUE), target)
        with Image.open(target) as written:
            assert written.getpixel((0, 0)) == BLUE

    def test_failed_commit_leaves_nothing(self, tmp_path):
        target = tmp_path / "out.png"
        with patch.object(Image.Image, "save", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                commit_image(Image.new("RGBA", (2, 2), RED), target)
        assert list(tmp_path.iterdir()) == []

    def test_commit_honours_umask(self, tmp_path):
        target = tmp_path / "out.png"
        previous = os.umask(0o022)
        try:
            commit_image(Image.new("RGBA", (4, 4), RED), target)
        finally:
            os.umask(previous)
        assert stat.S_IMODE(target.stat().st_mode) == 0o644
