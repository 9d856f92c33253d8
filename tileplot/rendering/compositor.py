"""Tile merging, image combination and atomic image commit."""

import os
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from PIL import Image

from ..abstractions.types import BoundingBox
from ..exceptions import (
    MissingImageError, MissingTileError, OutputExistsError, OutputNotWritableError
)
from .canvas import TRANSPARENT
from .tile_rasterizer import Tile
from .transform import CoordinateTransform

logger = logging.getLogger(__name__)

DATA_IMAGE_NAME = "_data.png"
BOUNDARIES_IMAGE_NAME = "_partitions.png"


def adjust_to_aspect_ratio(mbr: BoundingBox, width: int, height: int) -> Tuple[int, int]:
    """Shrink one canvas dimension so the canvas matches the MBR's aspect ratio."""
    mbr = mbr.non_degenerate()
    if mbr.width / mbr.height > width / height:
        height = int(mbr.height * width / mbr.width)
    else:
        width = int(mbr.width * height / mbr.height)
    return max(1, width), max(1, height)


@dataclass(frozen=True)
class CombineSource:
    """A previously plotted dataset taking part in an image combination."""
    mbr: BoundingBox
    data_image: Path
    boundaries_image: Optional[Path] = None

    @classmethod
    def from_directory(cls, directory: Union[str, Path], mbr: BoundingBox) -> 'CombineSource':
        directory = Path(directory)
        return cls(mbr=mbr,
                   data_image=directory / DATA_IMAGE_NAME,
                   boundaries_image=directory / BOUNDARIES_IMAGE_NAME)


class Compositor:
    """Assemble tiles or whole images onto one RGBA canvas."""

    @staticmethod
    def overlay(canvas: Image.Image, image: Image.Image, offset: Tuple[int, int]):
        """Alpha-aware "over" of image onto canvas at an integer offset.

        Parts of the image falling outside the canvas are cropped first.
        """
        ox, oy = offset
        left, top = max(0, -ox), max(0, -oy)
        right = min(image.width, canvas.width - ox)
        bottom = min(image.height, canvas.height - oy)
        if right <= left or bottom <= top:
            return
        if (left, top, right, bottom) != (0, 0, image.width, image.height):
            image = image.crop((left, top, right, bottom))
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        canvas.alpha_composite(image, dest=(ox + left, oy + top))

    def merge_tiles(self, tiles: Sequence[Tile], width: int, height: int,
                    expected_count: int) -> Image.Image:
        """Merge one tile per grid cell into the final image.

        A single tile covering the whole canvas is adopted as-is.
        """
        if len(tiles) != expected_count:
            raise MissingTileError(expected_count, len(tiles))

        if len(tiles) == 1 and tiles[0].origin == (0, 0) and tiles[0].size == (width, height):
            logger.debug("Single full-canvas tile, adopting it as the final image")
            return tiles[0].image

        canvas = Image.new("RGBA", (width, height), TRANSPARENT)
        for tile in sorted(tiles, key=lambda t: (t.cell[1], t.cell[0])):
            self.overlay(canvas, tile.image, tile.origin)
        logger.debug(f"Merged {len(tiles)} tiles into {width}x{height} image")
        return canvas

    def combine_images(self, sources: Sequence[CombineSource], width: int, height: int,
                       include_boundaries: bool = False,
                       vertical_flip: bool = False) -> Image.Image:
        """Place previously rendered dataset images proportionally within their union MBR."""
        if not sources:
            raise ValueError("At least one dataset is required to combine images")

        union = sources[0].mbr
        for source in sources[1:]:
            union = union.expand(source.mbr)
        union = union.non_degenerate()
        width, height = adjust_to_aspect_ratio(union, width, height)
        transform = CoordinateTransform(union, width, height, vertical_flip)

        result = Image.new("RGBA", (width, height), TRANSPARENT)
        for source in sources:
            rect = transform.cell_pixel_rect(source.mbr.non_degenerate())
            if not source.data_image.exists():
                raise MissingImageError(f"Image {source.data_image} not ready")
            self._place(result, source.data_image, rect.origin, rect.size)

            if include_boundaries and source.boundaries_image is not None:
                if source.boundaries_image.exists():
                    self._place(result, source.boundaries_image, rect.origin, rect.size)
                else:
                    logger.debug(f"No boundaries image at {source.boundaries_image}")

        logger.info(f"Combined {len(sources)} images into {width}x{height} image")
        return result

    def _place(self, canvas: Image.Image, path: Path,
               origin: Tuple[int, int], size: Tuple[int, int]):
        with Image.open(path) as image:
            image = image.convert("RGBA")
        if size[0] < 1 or size[1] < 1:
            return
        if image.size != size:
            image = image.resize(size)
        self.overlay(canvas, image, origin)


def check_output_path(path: Union[str, Path], overwrite: bool = False) -> Path:
    """Fail early when the output cannot or must not be written."""
    path = Path(path)
    if path.exists():
        if path.is_dir():
            raise OutputExistsError(f"Output path {path} is a directory")
        if not overwrite:
            raise OutputExistsError(f"Output file {path} already exists; use overwrite to replace it")
    parent = path.parent if str(path.parent) else Path('.')
    if not parent.exists():
        raise OutputNotWritableError(f"Output directory {parent} does not exist")
    if not os.access(parent, os.W_OK):
        raise OutputNotWritableError(f"Output directory {parent} is not writable")
    return path


def commit_image(image: Image.Image, path: Union[str, Path], image_format: str = "PNG") -> Path:
    """Write the image next to its destination and promote it with a rename.

    Readers of ``path`` never observe a partially written file.
    """
    path = Path(path)
    temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}.tmp")
    handle = open(temp_path, 'xb')
    try:
        with handle:
            image.save(handle, format=image_format)
        os.replace(temp_path, path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise
    logger.info(f"Committed {image.width}x{image.height} image to {path}")
    return path
