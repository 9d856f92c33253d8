# tileplot/abstractions/types/processing_types.py
"""Processing-related type definitions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple
import time


class ProcessingStatus(Enum):
    """Status of processing operations."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RenderMode(Enum):
    """How a plot job renders its image."""
    LOCAL = "local"
    DISTRIBUTED = "distributed"


@dataclass
class TileProgress:
    """Progress information for one grid cell."""
    cell: Tuple[int, int]
    status: ProcessingStatus = ProcessingStatus.PENDING
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    shape_count: int = 0
    error_message: Optional[str] = None

    @property
    def processing_time_seconds(self) -> Optional[float]:
        """Get processing time in seconds."""
        if self.start_time is None:
            return None
        end_time = self.end_time or time.time()
        return end_time - self.start_time

    def mark_started(self):
        self.status = ProcessingStatus.PROCESSING
        self.start_time = time.time()

    def mark_completed(self, shape_count: int):
        self.status = ProcessingStatus.COMPLETED
        self.end_time = time.time()
        self.shape_count = shape_count

    def mark_failed(self, error: Exception):
        self.status = ProcessingStatus.FAILED
        self.end_time = time.time()
        self.error_message = str(error)


@dataclass
class PlotResult:
    """Summary of a finished plot job."""
    output_path: str
    width: int
    height: int
    mode: RenderMode
    rows: int = 1
    cols: int = 1
    tile_count: int = 1
    shape_count: int = 0
    stage_timings: Dict[str, float] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_time(self) -> float:
        return sum(self.stage_timings.values())
