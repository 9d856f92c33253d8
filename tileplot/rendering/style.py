"""Job-scoped drawing parameters threaded into every render task."""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from PIL import ImageColor

from .color_mapper import RGBA, ValueColorMapper


def parse_color(color: Union[str, Tuple[int, ...]]) -> RGBA:
    """Normalise a Pillow color name, hex string or tuple to RGBA."""
    if isinstance(color, str):
        rgb = ImageColor.getrgb(color)
    else:
        rgb = tuple(int(c) for c in color)
    if len(rgb) == 3:
        return (rgb[0], rgb[1], rgb[2], 255)
    if len(rgb) == 4:
        return (rgb[0], rgb[1], rgb[2], rgb[3])
    raise ValueError(f"Unsupported color {color!r}")


@dataclass(frozen=True)
class PlotStyle:
    """Stroke color, optional value mapper and footprint of drawn shapes."""
    stroke: RGBA = (0, 0, 0, 255)
    color_mapper: Optional[ValueColorMapper] = None
    point_size: int = 1
    show_borders: bool = False
    border_color: RGBA = (128, 128, 128, 255)

    def __post_init__(self):
        if self.point_size < 1:
            raise ValueError(f"point_size must be >= 1, got {self.point_size}")

    @property
    def footprint(self) -> int:
        """Largest number of pixels a shape extends beyond its anchor pixel."""
        return self.point_size

    @classmethod
    def create(cls, color: Union[str, Tuple[int, ...]] = 'black',
               color_mapper: Optional[ValueColorMapper] = None,
               point_size: int = 1,
               show_borders: bool = False,
               border_color: Union[str, Tuple[int, ...]] = 'gray') -> 'PlotStyle':
        return cls(
            stroke=parse_color(color),
            color_mapper=color_mapper,
            point_size=point_size,
            show_borders=show_borders,
            border_color=parse_color(border_color),
        )
