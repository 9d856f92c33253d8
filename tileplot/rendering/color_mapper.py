"""Deterministic value to color mapping for valued points."""

import colorsys
from typing import Tuple

from ..abstractions.types import ValueRange

RGBA = Tuple[int, int, int, int]

# Hue of pure blue in HSB, 2/3
MAX_HUE: float = colorsys.rgb_to_hsv(0.0, 0.0, 1.0)[0]

SATURATION = 0.5
BRIGHTNESS = 1.0


def hsb_to_rgba(hue: float, saturation: float = SATURATION,
                brightness: float = BRIGHTNESS) -> RGBA:
    """Convert HSB to an opaque 8-bit RGBA tuple."""
    r, g, b = colorsys.hsv_to_rgb(hue, saturation, brightness)
    return (int(r * 255 + 0.5), int(g * 255 + 0.5), int(b * 255 + 0.5), 255)


class ValueColorMapper:
    """Map a scalar onto a hue between blue (min) and red (max).

    Values below the range are blue, values at or above max are red
    (hue 0); everything in between is interpolated linearly on hue.
    """

    def __init__(self, value_range: ValueRange):
        self.value_range = value_range

    def hue(self, value: float) -> float:
        lo = self.value_range.min_value
        hi = self.value_range.max_value
        if value < lo:
            return MAX_HUE
        if value < hi:
            return MAX_HUE - MAX_HUE * (value - lo) / (hi - lo)
        return 0.0

    def color(self, value: float) -> RGBA:
        return hsb_to_rgba(self.hue(value))

    def __repr__(self) -> str:
        return f"ValueColorMapper({self.value_range})"
