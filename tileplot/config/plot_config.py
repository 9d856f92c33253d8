"""Job-level plot configuration with system resource detection."""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union

import psutil

from ..abstractions.types import BoundingBox, ValueRange
from ..rendering.shapes import ShapeKind
from ..rendering.style import parse_color

logger = logging.getLogger(__name__)

EXECUTORS = ('process', 'thread')


@dataclass
class PlotConfig:
    """Everything a single plot job needs to know."""

    input_path: str
    output_path: str
    shape_kind: Union[str, ShapeKind] = ShapeKind.POINT

    # Image
    width: int = 1000
    height: int = 1000
    color: str = 'black'
    vertical_flip: bool = False
    keep_aspect_ratio: bool = True
    point_size: int = 1

    # Data selection
    value_range: Optional[Union[str, ValueRange]] = None
    plot_range: Optional[Union[str, BoundingBox]] = None

    # Output
    show_borders: bool = False
    border_color: str = 'gray'
    overwrite: bool = False

    # Execution mode
    force_local: bool = False
    force_distributed: bool = False
    block_size_mb: float = 64
    local_block_threshold: float = 3
    max_workers: Optional[int] = None  # Auto-detect if None
    cpu_safety_factor: float = 1.0
    executor: str = 'process'

    def __post_init__(self):
        """Normalise field types, validate, and auto-detect workers."""
        self.input_path = str(self.input_path)
        self.output_path = str(self.output_path)
        self.shape_kind = ShapeKind.parse(self.shape_kind)
        if isinstance(self.value_range, str):
            self.value_range = ValueRange.from_string(self.value_range)
        if isinstance(self.plot_range, str):
            self.plot_range = BoundingBox.from_string(self.plot_range)

        if self.width < 1 or self.height < 1:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.point_size < 1:
            raise ValueError(f"point_size must be >= 1, got {self.point_size}")
        if self.force_local and self.force_distributed:
            raise ValueError("force_local and force_distributed are mutually exclusive")
        if self.executor not in EXECUTORS:
            raise ValueError(f"executor must be one of {EXECUTORS}, got {self.executor!r}")
        if self.block_size_mb <= 0:
            raise ValueError(f"block_size_mb must be positive, got {self.block_size_mb}")
        parse_color(self.color)
        parse_color(self.border_color)

        if self.max_workers is None:
            cpu_count = psutil.cpu_count() or 1
            self.max_workers = max(1, int(cpu_count * self.cpu_safety_factor))
            logger.debug(f"Auto-detected max workers: {self.max_workers}")
        elif self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @property
    def block_size_bytes(self) -> int:
        return int(self.block_size_mb * 1024 * 1024)

    @property
    def is_valued(self) -> bool:
        return self.shape_kind is ShapeKind.VALUED_POINT

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ShapeKind):
                value = value.value
            elif isinstance(value, (ValueRange, BoundingBox)):
                value = str(value)
            result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'PlotConfig':
        """Create config from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in config_dict.items()
                      if k in cls.__dataclass_fields__})

    @classmethod
    def from_config(cls, settings, input_path: str, output_path: str,
                    **overrides) -> 'PlotConfig':
        """Build from a Config's rendering and partitioning sections.

        Keyword overrides whose value is None fall back to the config.
        """
        merged: Dict[str, Any] = {}
        merged.update(settings.get('rendering', {}) or {})
        merged.update(settings.get('partitioning', {}) or {})
        merged.update({k: v for k, v in overrides.items() if v is not None})
        merged['input_path'] = input_path
        merged['output_path'] = output_path
        return cls.from_dict(merged)
