"""Color scale legend for valued-point plots."""

import math
import logging
from pathlib import Path
from typing import Union

from PIL import Image, ImageDraw, ImageFont

from ..abstractions.types import ValueRange
from .color_mapper import MAX_HUE, hsb_to_rgba
from .compositor import commit_image

logger = logging.getLogger(__name__)

FONT_SIZE = 24
FONT_NAME = "DejaVuSans-Bold.ttf"
LABEL_MARGIN = 5


def _load_font(size: int):
    try:
        return ImageFont.truetype(FONT_NAME, size)
    except OSError:
        logger.debug(f"Font {FONT_NAME} unavailable, using Pillow default font")
        return ImageFont.load_default(size=size)


def label_step(value_range: ValueRange, height: int, font_size: int = FONT_SIZE) -> int:
    """Distance between two labels, rounded to a power of ten."""
    raw = value_range.span * font_size * 10 // max(1, height)
    if raw < 1:
        return 1
    return int(10 ** round(math.log10(raw)))


def render_scale(value_range: ValueRange, width: int, height: int,
                 font_size: int = FONT_SIZE) -> Image.Image:
    """Draw the hue gradient with numeric labels on a black background.

    The gradient occupies the right quarter of the image, red at the top
    and blue at the bottom; labels are drawn in white on the left.
    """
    image = Image.new("RGBA", (width, height), (0, 0, 0, 255))
    draw = ImageDraw.Draw(image)

    bar_x = width * 3 // 4
    for y in range(height):
        hue = y * MAX_HUE / height
        draw.line([(bar_x, y), (width - 1, y)], fill=hsb_to_rgba(hue))

    if value_range.span <= 0:
        return image

    font = _load_font(font_size)
    step = label_step(value_range, height, font_size)
    lo = value_range.min_value // step * step
    hi = value_range.max_value // step * step
    usable = height - font_size
    for value in range(lo, hi + 1, step):
        baseline = font_size + usable - (value - value_range.min_value) * usable // value_range.span
        draw.text((LABEL_MARGIN, baseline - font_size), str(value),
                  fill=(255, 255, 255, 255), font=font)
    return image


def draw_scale(output: Union[str, Path], value_range: ValueRange,
               width: int, height: int) -> Path:
    """Render the legend image and commit it to output."""
    image = render_scale(value_range, width, height)
    logger.info(f"Drawing scale {value_range} into {width}x{height} legend")
    return commit_image(image, output)
