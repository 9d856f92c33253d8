"""Shared state of one plot job, passed from stage to stage."""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from PIL import Image

from ..abstractions.types import (
    BoundingBox, ProcessingStatus, RenderMode, TileProgress, ValueRange
)
from ..config.plot_config import PlotConfig
from ..datasource.shape_reader import ShapeSource
from ..grid_systems.partition_grid import GridSpec
from ..infrastructure.logging import LoggingContext
from ..rendering.style import PlotStyle
from ..rendering.tile_rasterizer import Tile
from ..rendering.transform import CoordinateTransform


@dataclass
class PlotContext:
    """Shared context for plot pipeline execution."""
    config: PlotConfig
    logging_context: LoggingContext
    cancel_event: threading.Event = field(default_factory=threading.Event)

    # Filled in by the stages, in order
    source: Optional[ShapeSource] = None
    file_mbr: Optional[BoundingBox] = None
    value_range: Optional[ValueRange] = None
    width: int = 0
    height: int = 0
    transform: Optional[CoordinateTransform] = None
    style: Optional[PlotStyle] = None
    mode: Optional[RenderMode] = None
    grid: Optional[GridSpec] = None
    tiles: List[Tile] = field(default_factory=list)
    image: Optional[Image.Image] = None

    tile_progress: Dict[Tuple[int, int], TileProgress] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    _progress_lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def set(self, key: str, value: Any):
        self.metadata[key] = value

    @property
    def expected_tiles(self) -> int:
        if self.mode is RenderMode.DISTRIBUTED and self.grid is not None:
            return self.grid.cell_count
        return 1

    def progress(self, cell: Tuple[int, int]) -> TileProgress:
        with self._progress_lock:
            if cell not in self.tile_progress:
                self.tile_progress[cell] = TileProgress(cell=cell)
            return self.tile_progress[cell]

    def get_progress_summary(self) -> Dict[str, Any]:
        """Counts of cells per status and completion percentage."""
        with self._progress_lock:
            total = len(self.tile_progress)
            if total == 0:
                return {'completion_percentage': 0.0, 'total_tiles': 0}

            counts = {status: 0 for status in ProcessingStatus}
            for p in self.tile_progress.values():
                counts[p.status] += 1
            times = [p.processing_time_seconds for p in self.tile_progress.values()
                     if p.processing_time_seconds is not None]

            return {
                'completion_percentage': counts[ProcessingStatus.COMPLETED] / total * 100.0,
                'total_tiles': total,
                'completed_tiles': counts[ProcessingStatus.COMPLETED],
                'failed_tiles': counts[ProcessingStatus.FAILED],
                'processing_tiles': counts[ProcessingStatus.PROCESSING],
                'cancelled_tiles': counts[ProcessingStatus.CANCELLED],
                'pending_tiles': counts[ProcessingStatus.PENDING],
                'average_processing_time_seconds': sum(times) / len(times) if times else 0.0,
                'shapes_drawn': sum(p.shape_count for p in self.tile_progress.values()),
            }
